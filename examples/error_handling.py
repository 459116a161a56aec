"""Error handling patterns with recovery hints.

Only a broken repository list stops a run. Everything else is reported
per repository or per core, and every library error carries a
recovery_hint with actionable guidance.
"""

import sys
from pathlib import Path

from coreinventory import (
    CoreInventoryError,
    DefinitionParser,
    InventoryConfig,
    ParseError,
    RepositoryListError,
    Synchronizer,
    parse_repositories,
)


# Pattern 1: A malformed repository list is fatal
def load_repositories(config: InventoryConfig):
    try:
        return parse_repositories(config.repositories_path)
    except RepositoryListError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Hint: {e.recovery_hint}", file=sys.stderr)
        sys.exit(1)


# Pattern 2: Repository failures are collected, not raised
def report_failures(synchronizer: Synchronizer, config: InventoryConfig) -> None:
    report = synchronizer.sync(load_repositories(config))
    for failure in report.failures:
        print(f"{failure.repository.github_repository}: {failure.message}")
    for result in report.results:
        if result.failed:
            print(f"{result.repository.github_repository}: bad cores {result.failed}")


# Pattern 3: Validate a core package before publishing it
def check_package(root: Path) -> bool:
    """Parse every core in an extracted package, printing problems."""
    parser = DefinitionParser(root)
    ok = True
    for core_id in parser.core_ids():
        try:
            core = parser.get_core(core_id)
            if core is not None:
                parser.get_platform(core.definition.platform_id)
        except ParseError as e:
            print(f"{core_id}: {e.reason}")
            print(f"Hint: {e.recovery_hint}")
            ok = False
    return ok


# Pattern 4: Catch any library error with the base class
def safe_sync(config: InventoryConfig) -> None:
    try:
        with Synchronizer.from_config(config) as synchronizer:
            synchronizer.sync(load_repositories(config))
    except CoreInventoryError as e:
        print(f"Unexpected error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        raise


if __name__ == "__main__":
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    sys.exit(0 if check_package(root) else 1)
