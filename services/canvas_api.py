"""Wrapper for Canvas LMS REST API interactions."""

from typing import Any, Dict, List, NoReturn, Optional

import httpx

import config
from core.models import Assignment, Course, Submission, UserProfile
from utils.logger import get_logger
from utils.error_handler import APIError, AuthenticationError

logger = get_logger()


class CanvasService:
    """Provides methods to interact with the Canvas REST API."""

    SERVICE_NAME = 'canvas'

    def __init__(self, client: httpx.AsyncClient):
        """Initializes the CanvasService.

        Args:
            client: HTTP client from api_clients.build_client().
        """
        self.client = client

    def _raise_api_error(self, action: str, e: Exception) -> NoReturn:
        if isinstance(e, httpx.HTTPStatusError):
            status = e.response.status_code
            logger.error(f"Failed to {action}: {status} {e.response.text[:200]}", exc_info=config.DEBUG)
            if status == 401:
                raise AuthenticationError(
                    f"Canvas rejected the access token while trying to {action} (401). Check CANVAS_ACCESS_TOKEN."
                ) from e
            raise APIError(f"Failed to {action}: {status}", status_code=status, service=self.SERVICE_NAME) from e
        logger.error(f"Network error while trying to {action}: {e}", exc_info=config.DEBUG)
        raise APIError(f"Network error while trying to {action}: {e}", service=self.SERVICE_NAME) from e

    async def _get_json(self, path: str, action: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            self._raise_api_error(action, e)
        except ValueError as e:
            raise APIError(f"Canvas returned invalid JSON while trying to {action}: {e}", service=self.SERVICE_NAME) from e

    async def _get_paginated(self, path: str, action: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Follows the Link rel="next" headers until every page has been read."""
        items: List[Dict[str, Any]] = []
        url: Optional[str] = path
        query: Optional[Dict[str, Any]] = {"per_page": config.DEFAULT_PAGE_SIZE, **(params or {})}
        try:
            while url:
                response = await self.client.get(url, params=query)
                response.raise_for_status()
                page = response.json()
                if config.DEBUG:
                    logger.debug(f"Fetched page with {len(page)} items from {url}.")
                items.extend(page)

                url = response.links.get('next', {}).get('url')
                query = None  # the next link already carries the query string
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            self._raise_api_error(action, e)
        except ValueError as e:
            raise APIError(f"Canvas returned invalid JSON while trying to {action}: {e}", service=self.SERVICE_NAME) from e
        return items

    async def verify_credentials(self) -> UserProfile:
        """Fetches the profile of the token owner to check the token works."""
        return await self.get_user_profile('self')

    async def list_courses(self) -> List[Course]:
        """Lists courses the user is enrolled in (as teacher or TA).

        Raises:
            APIError: If the API call fails.
        """
        logger.info("Fetching courses...")
        payload = await self._get_paginated('/courses', 'list courses', {"enrollment_state": "active"})
        courses = [Course.from_api(c) for c in payload if 'id' in c]
        logger.info(f"Successfully fetched {len(courses)} courses.")
        return courses

    async def list_assignments(self, course_id: int) -> List[Assignment]:
        """Lists assignments for a specific course.

        Raises:
            APIError: If the API call fails.
        """
        logger.info(f"Fetching assignments for course ID: {course_id}...")
        payload = await self._get_paginated(f'/courses/{course_id}/assignments', f'list assignments for course {course_id}')
        assignments = [Assignment.from_api(a) for a in payload]
        logger.info(f"Successfully fetched {len(assignments)} assignments for course {course_id}.")
        return assignments

    async def list_submissions(self, course_id: int, assignment_id: int) -> List[Submission]:
        """Lists student submissions for a specific assignment, in server order.

        Raises:
            APIError: If the API call fails.
        """
        logger.info(f"Fetching submissions for assignment {assignment_id} in course {course_id}...")
        payload = await self._get_paginated(
            f'/courses/{course_id}/assignments/{assignment_id}/submissions',
            f'list submissions for assignment {assignment_id}',
        )
        submissions = [Submission.from_api(s) for s in payload]
        logger.info(f"Successfully fetched {len(submissions)} submissions for assignment {assignment_id}.")
        return submissions

    async def get_user_profile(self, user_id: int | str) -> UserProfile:
        """Gets a user's profile, including the sortable name.

        Raises:
            APIError: If the API call fails.
        """
        logger.debug(f"Fetching profile for user ID: {user_id}...")
        payload = await self._get_json(f'/users/{user_id}/profile', f'get profile for user {user_id}')
        profile = UserProfile.from_api(payload)
        logger.debug(f"Successfully fetched profile for user {user_id}: {profile.sortable_name}")
        return profile

    async def download_attachment(self, url: str) -> bytes:
        """Downloads the raw bytes of a submission attachment.

        Raises:
            APIError: If the download fails.
        """
        logger.info(f"Downloading attachment from {url}...")
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            self._raise_api_error('download attachment', e)
        logger.info(f"Downloaded {len(response.content)} bytes.")
        return response.content
