"""
Client for the hosted database's REST endpoint holding availability rules.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import RuleSourceError
from ..domain.models import AvailabilityRule
from .json_rule_source import parse_records

logger = logging.getLogger(__name__)


class RestRuleSource:
    """
    Fetches active availability rules over a PostgREST-style HTTP API.

    Equivalent to selecting from ``availability_slots`` where
    ``mentor_id`` matches and ``is_active`` is true, ordered by start time.
    """

    REST_PATH = "/rest/v1"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "availability_slots",
        timeout: int = 30,
    ):
        """
        Initialize the REST client.

        Args:
            base_url: Project URL of the hosted database
            api_key: API key sent as ``apikey`` and bearer token
            table: Table holding the availability rows
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.table = table
        self.timeout = timeout
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }

    def get_rules(self, mentor_id: Optional[str] = None) -> List[AvailabilityRule]:
        """
        Get the active availability rules of a mentor.

        Args:
            mentor_id: Mentor whose rules to load; all mentors when None

        Returns:
            List of parsed AvailabilityRule objects

        Raises:
            RuleSourceError: If the API call fails or returns unexpected data
        """
        url = f"{self.base_url}{self.REST_PATH}/{self.table}"

        params: Dict[str, str] = {
            "select": "*",
            "is_active": "eq.true",
            "order": "start_time.asc",
        }
        if mentor_id is not None:
            params["mentor_id"] = f"eq.{mentor_id}"

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data: Any = response.json()

        except requests.exceptions.RequestException as e:
            raise RuleSourceError(f"Failed to fetch availability rules: {e}") from e
        except ValueError as e:
            raise RuleSourceError(f"Availability API returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise RuleSourceError("Availability API did not return a list of records.")

        logger.debug("Fetched %d availability record(s) for mentor %s", len(data), mentor_id)
        return parse_records(data)
