"""Advisory checks run over the files of an extracted submission.

The checks only report; they never modify files or stop the review.
"""

import re
from pathlib import Path
from typing import List, Optional, Pattern

import config
from core.models import CheckResult, FileRecord
from utils.error_handler import FilesystemError
from utils.logger import get_logger

logger = get_logger()

GRADED_FILE_RE: Pattern[str] = re.compile(config.GRADED_FILE_PATTERN, re.IGNORECASE)


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding='utf-8')
    except (UnicodeDecodeError, OSError) as e:
        logger.debug(f"No text content for {path}: {e}")
        return None


def collect_files(directory: Path) -> List[FileRecord]:
    """Lists the regular files directly inside ``directory`` with their text.

    Subdirectories are skipped. Binary or unreadable files get no contents.

    Raises:
        FilesystemError: If the directory cannot be listed.
    """
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        files = [p for p in entries if p.is_file()]
    except OSError as e:
        raise FilesystemError(f"Could not list extracted files in {directory}: {e}") from e

    return [FileRecord(path=p, name=p.name, contents=_read_text(p)) for p in files]


def is_graded_file(record: FileRecord, pattern: Pattern[str] = GRADED_FILE_RE) -> bool:
    """Source, build and readme files, the ones opened for review."""
    return pattern.search(record.name.lower()) is not None


def is_readme(record: FileRecord) -> bool:
    return 'readme' in record.name.lower()


def _contains(record: FileRecord, needle: str) -> bool:
    return needle.lower() in (record.contents or '').lower()


def check_name_mentions(
    files: List[FileRecord],
    family_name: str,
    pattern: Pattern[str] = GRADED_FILE_RE,
) -> List[CheckResult]:
    """Reports whether each graded file mentions the student's family name."""
    return [CheckResult(f.name, _contains(f, family_name)) for f in files if is_graded_file(f, pattern)]


def check_disclaimer(files: List[FileRecord], phrase: str = config.README_DISCLAIMER) -> List[CheckResult]:
    """Reports whether each readme contains the originality disclaimer."""
    return [CheckResult(f.name, _contains(f, phrase)) for f in files if is_readme(f)]
