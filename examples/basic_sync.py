"""Basic synchronization example.

Run from anywhere inside a Jekyll site that has ``_data/repositories.yml``.
Archives are downloaded from GitHub, so this needs network access; set
GITHUB_TOKEN to raise the API rate limit for release lookups.
"""

import logging
import os

from coreinventory import (
    InventoryConfig,
    RichProgressReporter,
    Synchronizer,
    YamlInventoryWriter,
    parse_repositories,
)


logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# Discover the site root and read the token from the environment
config = InventoryConfig.from_directory(github_token=os.environ.get("GITHUB_TOKEN"))

# Four repositories are downloaded at a time; leaving the block closes
# the HTTP clients
with Synchronizer.from_config(config, max_workers=4) as synchronizer:
    with RichProgressReporter() as progress:
        report = synchronizer.sync(
            parse_repositories(config.repositories_path), progress=progress
        )

YamlInventoryWriter(config.cores_path).write(report.inventory())

print(f"New: {report.count('new')}")
print(f"Updated: {report.count('updated')}")
print(f"Unchanged: {report.count('unchanged')}")
for failure in report.failures:
    print(f"Failed: {failure.repository.github_repository}: {failure.message}")
