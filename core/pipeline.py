"""Core logic for downloading, extracting, inspecting and reviewing submissions."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import config
from core.archive import extract_archive
from core.inspection import GRADED_FILE_RE, check_disclaimer, check_name_mentions, collect_files, is_graded_file
from core.models import CheckResult, DownloadedSubmission, FileRecord, UserSubmission
from services.canvas_api import CanvasService
from utils.logger import get_logger
from utils.error_handler import AttachmentNotFoundError, BaseGraderException, UserCancelledError

logger = get_logger()


class SubmissionState(str, Enum):
    FETCHED = "fetched"
    DOWNLOADING = "downloading"
    EXTRACTED = "extracted"
    INSPECTING = "inspecting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    name: str
    state: SubmissionState
    error: Optional[BaseGraderException] = None
    # State the entry was in when it failed
    failed_at: Optional[SubmissionState] = None


@dataclass
class InspectionReport:
    files: List[FileRecord]
    name_mentions: List[CheckResult] = field(default_factory=list)
    disclaimers: List[CheckResult] = field(default_factory=list)

    @property
    def graded_files(self) -> List[FileRecord]:
        return [f for f in self.files if is_graded_file(f)]


@dataclass
class ReviewHooks:
    """The interactive side of a review, supplied by the caller."""

    show_header: Callable[[str], None]
    show_report: Callable[[str, List[CheckResult]], None]
    acknowledge: Callable[[], None]
    open_file: Callable[[Path], object]
    open_shell: Callable[[Path], object]


def directory_name(sortable_name: str) -> str:
    """A single path component for the student's extraction directory."""
    name = sortable_name.replace("/", "_").replace("\\", "_").strip()
    if name in ("", ".", ".."):
        return "_"
    return name


class SubmissionPipeline:
    """Takes selected submissions one at a time from download to review.

    By default the first failing submission stops the run. With
    ``continue_on_error`` the failure is recorded and the next submission
    is processed.
    """

    def __init__(
        self,
        canvas_service: CanvasService,
        hooks: ReviewHooks,
        download_root: Optional[Path] = None,
        continue_on_error: Optional[bool] = None,
        disclaimer: str = config.README_DISCLAIMER,
    ):
        self.canvas_service = canvas_service
        self.hooks = hooks
        self.download_root = download_root if download_root is not None else Path(config.DOWNLOAD_DIR)
        self.continue_on_error = config.CONTINUE_ON_ERROR if continue_on_error is None else continue_on_error
        self.disclaimer = disclaimer
        logger.info(
            f"Pipeline initialized: download_root={self.download_root}, continue_on_error={self.continue_on_error}"
        )

    async def download_submission(self, entry: UserSubmission) -> DownloadedSubmission:
        """Downloads the first attachment and extracts it into the student's directory.

        Raises:
            AttachmentNotFoundError: If the submission has no attachment.
            APIError: If the download fails.
            ArchiveExtractionError: If the attachment is not a valid archive.
            FilesystemError: If the files cannot be written.
        """
        profile = entry.user_profile
        if not entry.submission.attachments:
            raise AttachmentNotFoundError(f"Submission from {profile.sortable_name} has no attachment to download.")

        attachment = entry.submission.attachments[0]
        if len(entry.submission.attachments) > 1:
            logger.warning(
                f"{profile.sortable_name} submitted {len(entry.submission.attachments)} attachments; only the first "
                f"({attachment.display_name or attachment.filename or attachment.url}) is downloaded."
            )
        body = await self.canvas_service.download_attachment(attachment.url)

        path = self.download_root / directory_name(profile.sortable_name)
        # Extraction is CPU and disk bound, keep it off the event loop
        await asyncio.to_thread(extract_archive, body, path, True)
        logger.info(f"Extracted submission of {profile.sortable_name} into {path}")
        return DownloadedSubmission(user_profile=profile, path=path)

    async def inspect(self, downloaded: DownloadedSubmission) -> InspectionReport:
        """Runs the name and disclaimer checks over the extracted files."""
        files = await asyncio.to_thread(collect_files, downloaded.path)
        report = InspectionReport(
            files=files,
            name_mentions=check_name_mentions(files, downloaded.user_profile.family_name, GRADED_FILE_RE),
            disclaimers=check_disclaimer(files, self.disclaimer),
        )
        failed = [r.file_name for r in report.name_mentions + report.disclaimers if not r.passed]
        logger.info(
            f"Inspected {len(files)} files for {downloaded.user_profile.sortable_name}; failed checks: {failed or 'none'}"
        )
        return report

    def review(self, downloaded: DownloadedSubmission, report: InspectionReport) -> None:
        """Shows the reports, then opens graded files and a shell for the grader."""
        self.hooks.show_report("File contains name", report.name_mentions)
        self.hooks.show_report("File contains readme disclaimer", report.disclaimers)
        self.hooks.acknowledge()

        for record in report.graded_files:
            self.hooks.open_file(record.path)
        self.hooks.open_shell(downloaded.path)

    async def process(self, entry: UserSubmission) -> PipelineResult:
        """Runs one submission through every stage.

        Errors from any stage are captured in the returned result rather than raised.
        """
        name = entry.sortable_name
        result = PipelineResult(name=name, state=SubmissionState.FETCHED)
        try:
            result.state = SubmissionState.DOWNLOADING
            downloaded = await self.download_submission(entry)
            result.state = SubmissionState.EXTRACTED

            self.hooks.show_header(name)
            result.state = SubmissionState.INSPECTING
            report = await self.inspect(downloaded)
            self.review(downloaded, report)
            result.state = SubmissionState.DONE
        except UserCancelledError:
            raise
        except BaseGraderException as e:
            logger.error(f"Processing {name} failed while {result.state.value}: {e}", exc_info=config.DEBUG)
            result.failed_at = result.state
            result.state = SubmissionState.FAILED
            result.error = e
        return result

    async def run(self, entries: Iterable[UserSubmission]) -> List[PipelineResult]:
        """Processes the entries sequentially.

        Raises:
            BaseGraderException: The first entry failure, unless continue_on_error is set.
        """
        results: List[PipelineResult] = []
        for entry in entries:
            result = await self.process(entry)
            results.append(result)
            if result.error is not None and not self.continue_on_error:
                raise result.error
        done = sum(1 for r in results if r.state is SubmissionState.DONE)
        logger.info(f"Pipeline finished: {done}/{len(results)} submissions reviewed.")
        return results
