"""Main execution script for the Canvas Submission Grader."""

import asyncio
import sys

from dotenv import load_dotenv

# Environment first: config reads it at import time
load_dotenv()

import config
from utils.logger import setup_logger
from utils.error_handler import (AuthenticationError, APIError, ConfigError,
                                 AttachmentNotFoundError, ArchiveExtractionError,
                                 FilesystemError, InvalidSelectionError,
                                 MissingUserIdError, ExternalToolError,
                                 UserCancelledError)
import auth
from api_clients import build_client
from services.canvas_api import CanvasService
from core.fetcher import attach_profiles
from core.partition import select_portion
from core.pipeline import ReviewHooks, SubmissionPipeline
from core.selector import SubmissionSelector
import ui.cli as cli
import ui.terminal as terminal

# Initialize logger as early as possible after config is loaded
logger = setup_logger()


def build_review_hooks() -> ReviewHooks:
    return ReviewHooks(
        show_header=cli.display_grading_header,
        show_report=cli.display_check_report,
        acknowledge=cli.press_enter_to_continue,
        open_file=terminal.open_in_editor,
        open_shell=terminal.open_shell,
    )


async def run_workflow() -> None:
    """Course → assignment → portion → selection → per-submission review."""
    # --- Step 1: Credentials ---
    cli.display_step(1, "Connecting to Canvas...")
    credentials = auth.get_credentials()

    async with build_client(credentials) as client:
        canvas_service = CanvasService(client)
        me = await canvas_service.verify_credentials()
        cli.display_success(f"Signed in as {me.name}.")

        # --- Step 2: Select Course ---
        cli.display_step(2, "Loading courses...")
        courses = await canvas_service.list_courses()
        if not courses:
            cli.display_error("No active courses found for your account. Exiting.")
            return
        course = cli.prompt_for_selection(courses, cli.format_course_for_display, "Please select a course:")
        logger.info(f"User selected course: {course.name} (ID: {course.id})")

        # --- Step 3: Select Assignment ---
        cli.display_step(3, f"Loading assignments for '{course.name}'...")
        assignments = await canvas_service.list_assignments(course.id)
        if not assignments:
            cli.display_error(f"No assignments found for course '{course.name}'. Exiting.")
            return
        assignment = cli.prompt_for_selection(assignments, cli.format_assignment_for_display, "Please select an assignment:")
        logger.info(f"User selected assignment: {assignment.name} (ID: {assignment.id})")

        # --- Step 4: Divide the roster ---
        cli.display_step(4, "Fetching available submissions...")
        submissions = await canvas_service.list_submissions(course.id, assignment.id)
        cli.display_success(f"{len(submissions)} submissions found.")
        division_count = cli.prompt_division_count()
        portion_index = cli.prompt_portion(division_count)

        # --- Step 5: Resolve profiles and slice the portion ---
        cli.display_step(5, "Fetching selected portion...")
        roster = await attach_profiles(submissions, canvas_service.get_user_profile)
        portion = select_portion(roster, division_count, portion_index)
        if not portion:
            cli.display_warning("The selected portion is empty.")
            return

        # --- Step 6: Choose and grade ---
        cli.display_step(6, "Grading...")
        selector = SubmissionSelector(portion, cli.prompt_multi_selection)
        chosen = selector.select()
        pipeline = SubmissionPipeline(canvas_service, build_review_hooks())
        results = await pipeline.run(selector.iter_selected(chosen))

        if pipeline.continue_on_error:
            cli.display_pipeline_summary(results)


def main():
    """Main function to run the grading workflow."""
    logger.info("Starting Canvas Submission Grader.")
    cli.display_welcome()
    exit_code = 0

    try:
        asyncio.run(run_workflow())
    except ConfigError as e:
        logger.critical(f"Configuration error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Setup Error: {e}")
        exit_code = 2
    except AuthenticationError as e:
        logger.critical(f"Authentication error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Authentication Error: {e}")
        exit_code = 2
    except APIError as e:
        logger.error(f"Canvas API error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"API Error ({e.service or 'Unknown'}): {e}")
        exit_code = 1
    except (AttachmentNotFoundError, MissingUserIdError) as e:
        logger.error(f"Submission data error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Submission Error: {e}")
        exit_code = 1
    except (ArchiveExtractionError, FilesystemError) as e:
        logger.error(f"Extraction error: {e}", exc_info=config.DEBUG)
        cli.display_error(f"Extraction Error: {e}")
        exit_code = 1
    except InvalidSelectionError as e:
        logger.error(f"Invalid selection: {e}")
        cli.display_error(f"Invalid Selection: {e}")
        exit_code = 1
    except ExternalToolError as e:
        logger.error(f"Review tool error: {e}")
        cli.display_error(f"Review Error: {e}")
        exit_code = 1
    except UserCancelledError as e:
        logger.info(f"Operation cancelled by user: {e}")
        cli.display_warning(f"Operation cancelled: {e}")
    except KeyboardInterrupt:
        logger.info("Operation interrupted by user (Ctrl+C).")
        cli.display_warning("Operation interrupted.")
        exit_code = 130
    except Exception as e:
        # Catch-all for unexpected errors
        logger.critical(f"An unexpected error occurred: {e}", exc_info=True)
        cli.display_error(f"An unexpected error occurred: {e}. Check logs for details.")
        exit_code = 1
    finally:
        cli.display_farewell()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
