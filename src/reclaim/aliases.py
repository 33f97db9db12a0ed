from reclaim.core.models import RetentionPolicy

RETENTION_ALIASES = {
    "newest": RetentionPolicy.KEEP_NEWEST,
    "oldest": RetentionPolicy.KEEP_OLDEST,
}

RETENTION_CHOICES = list(RETENTION_ALIASES.keys())

RETENTION_HELP_TEXT = (
    "Which copy survives when cleaning a duplicate group:\n"
    "  newest : keep the most recently modified file (default)\n"
    "  oldest : keep the least recently modified file\n"
    "Files with equal modification times are resolved by scan order.\n"
)

EPILOG_TEXT = """
Examples:
  Find duplicates in Downloads (files of 1KB and more)
  %(prog)s -i ~/Downloads

  Only consider files of 500KB and more, show stage progress
  %(prog)s -i ~/Downloads -m 500K -v

  Move every duplicate except the oldest copy to trash (with confirmation prompt)
  %(prog)s -i ~/Pictures --clean --keep oldest

  Same as above without confirmation, for scripts
  %(prog)s -i ~/Pictures --clean --keep oldest --force > ~/cleanup.txt

  Print disk usage of the folder (hard links counted once) before scanning
  %(prog)s -i ~/Projects --usage
"""
