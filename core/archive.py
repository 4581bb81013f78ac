"""Extraction of downloaded ZIP attachments into a student's directory."""

import io
import shutil
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import List, Optional, Tuple

from utils.error_handler import ArchiveExtractionError, FilesystemError
from utils.logger import get_logger

logger = get_logger()


def _common_top_level(names: List[str]) -> Optional[str]:
    """Returns the single top-level directory shared by every member, if there is one."""
    tops = set()
    for name in names:
        parts = PurePosixPath(name).parts
        if len(parts) < 2 and not name.endswith('/'):
            # A file at the archive root means there is nothing to strip
            return None
        if parts:
            tops.add(parts[0])
    if len(tops) == 1:
        return tops.pop()
    return None


def _member_target(destination: Path, name: str, strip: Optional[str]) -> Optional[Path]:
    parts = PurePosixPath(name.replace('\\', '/')).parts
    if strip is not None and parts and parts[0] == strip:
        parts = parts[1:]
    if not parts:
        return None
    if PurePosixPath(name).is_absolute() or '..' in parts:
        raise ArchiveExtractionError(f"Archive member '{name}' points outside the extraction directory.")
    return destination.joinpath(*parts)


def extract_archive(data: bytes, destination: Path, strip_top_level: bool = True) -> List[Path]:
    """Extracts a ZIP archive held in memory into ``destination``.

    Existing files are overwritten and other existing content is left in
    place. When ``strip_top_level`` is set and every member sits under one
    common directory, that directory is dropped so the files land directly
    in ``destination``.

    Args:
        data: The raw archive bytes.
        destination: Directory to extract into; created if missing.
        strip_top_level: Whether to drop a single shared top-level directory.

    Returns:
        Paths of the extracted files.

    Raises:
        ArchiveExtractionError: If the data is not a valid ZIP archive, a member path is unsafe,
            or a member is encrypted or uses an unsupported compression method.
        FilesystemError: If the files cannot be written.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise ArchiveExtractionError(f"Attachment is not a readable ZIP archive: {e}") from e

    extracted: List[Path] = []
    with archive:
        names = archive.namelist()
        strip = _common_top_level(names) if strip_top_level else None
        members: List[Tuple[zipfile.ZipInfo, Path]] = []
        for info in archive.infolist():
            target = _member_target(destination, info.filename, strip)
            if target is not None:
                members.append((info, target))

        try:
            destination.mkdir(parents=True, exist_ok=True)
            for info, target in members:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as source, open(target, 'wb') as sink:
                    shutil.copyfileobj(source, sink)
                extracted.append(target)
        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            raise ArchiveExtractionError(f"Archive is corrupt: {e}") from e
        except (NotImplementedError, RuntimeError) as e:
            # Unsupported compression methods and encrypted members
            raise ArchiveExtractionError(f"Archive cannot be extracted: {e}") from e
        except OSError as e:
            raise FilesystemError(f"Could not write extracted files to {destination}: {e}") from e

    logger.debug(f"Extracted {len(extracted)} files into {destination} (stripped top level: {strip!r}).")
    return extracted
