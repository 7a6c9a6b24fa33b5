"""Version information for the GitHub to Jira issue sync.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "1.2.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 1.2.0 - Label summary in rich descriptions, dry-run mode
# 1.1.0 - Priority and component mapping from issue templates
# 1.0.0 - Initial release (label to issue type mapping, ADF descriptions)
