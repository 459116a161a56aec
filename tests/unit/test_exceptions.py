"""Unit tests for domain exceptions."""

from pathlib import Path

import pytest


@pytest.mark.core
@pytest.mark.tier(0)
class TestExceptionHierarchy:
    """Every library error is catchable through CoreInventoryError."""

    def test_all_errors_inherit_from_base(self) -> None:
        """All exceptions subclass CoreInventoryError."""
        from coreinventory.core.exceptions import (
            AcquisitionError,
            CacheCorruptError,
            CacheError,
            CoreInventoryError,
            ImageDecodeError,
            ParseError,
            RepositoryListError,
        )

        for error in (
            AcquisitionError,
            CacheCorruptError,
            CacheError,
            ImageDecodeError,
            ParseError,
            RepositoryListError,
        ):
            assert issubclass(error, CoreInventoryError)
        assert issubclass(CacheCorruptError, CacheError)

    def test_base_has_no_hint(self) -> None:
        """The base class offers no recovery hint."""
        from coreinventory.core.exceptions import CoreInventoryError

        assert CoreInventoryError("boom").recovery_hint is None


@pytest.mark.core
@pytest.mark.tier(0)
class TestExceptionMessages:
    """Messages and recovery hints name what went wrong."""

    def test_acquisition_error(self) -> None:
        """AcquisitionError names the repository and the reason."""
        from coreinventory.core.exceptions import AcquisitionError
        from coreinventory.core.models import RepositoryDescriptor

        repo = RepositoryDescriptor(owner="agg23", name="openfpga-pong")
        cause = OSError("connection reset")
        error = AcquisitionError(repo, "download failed", cause=cause)

        assert str(error) == "Could not acquire agg23/openfpga-pong: download failed"
        assert error.repository is repo
        assert error.cause is cause
        assert "github.com/agg23/openfpga-pong" in error.recovery_hint

    def test_parse_error(self) -> None:
        """ParseError names the file and the reason."""
        from coreinventory.core.exceptions import ParseError

        path = Path("Cores/agg23.pong/core.json")
        error = ParseError(path, "missing required field 'version'")

        assert "core.json" in str(error)
        assert "missing required field 'version'" in str(error)
        assert error.reason == "missing required field 'version'"
        assert "core.json" in error.recovery_hint

    def test_repository_list_error(self) -> None:
        """RepositoryListError points at the list file."""
        from coreinventory.core.exceptions import RepositoryListError

        error = RepositoryListError("bad", path=Path("_data/repositories.yml"))

        assert error.recovery_hint == (
            "Check repositories.yml for syntax or missing fields"
        )

    def test_cache_corrupt_error(self) -> None:
        """CacheCorruptError suggests invalidating the entry."""
        from coreinventory.core.exceptions import CacheCorruptError

        error = CacheCorruptError(
            "corrupt", key="agg23.pong", path=Path(".cache/agg23.pong.json")
        )

        assert error.key == "agg23.pong"
        assert "inventory invalidate agg23.pong" in error.recovery_hint
