# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper around the Supabase client.
# It implements the singleton pattern to reuse a single client connection
# and provides small helpers shared by the service layer:
# - Service-role client for data access (RLS bypassed, ownership checked in code)
# - Anon client for password sign-in
# - Single-row fetches that return None instead of raising on "no rows"
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   household = SupabaseClient.fetch_single("households", household_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        client = SupabaseClient.get_client()
        rows = client.table("households").select("*").execute().data
    """

    _instance: Client | None = None
    _anon_instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so
        every service method filters by owner explicitly.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def get_anon_client(cls) -> Client:
        """
        Get or create the anon-key client used for Supabase Auth calls.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._anon_instance is None:
            try:
                cls._anon_instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_ANON_KEY
                )
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase anon client: {e}",
                    code="ANON_CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return cls._anon_instance

    @classmethod
    def normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    @staticmethod
    def is_not_found(error: Exception) -> bool:
        """True when a PostgREST error means "no rows matched"."""
        return NO_ROWS_CODE in str(error) or getattr(error, "code", None) == NO_ROWS_CODE

    @classmethod
    def fetch_single(
        cls,
        table: str,
        record_id: str | UUID,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Fetch one row by primary key.

        Args:
            table: Table name
            record_id: Row UUID
            columns: PostgREST select expression
            filters: Extra equality filters (e.g. {"created_by": user_id})

        Returns:
            Row dict, or None if not found

        Raises:
            Exception: Backend errors other than "no rows" propagate
        """
        client = cls.get_client()

        query = (
            client.table(table)
            .select(columns)
            .eq("id", cls.normalize_uuid(record_id))
        )
        for column, value in (filters or {}).items():
            query = query.eq(column, cls.normalize_uuid(value))

        try:
            response = query.single().execute()
            return response.data
        except Exception as e:
            if cls.is_not_found(e):
                return None
            logger.error(f"Failed to fetch {table} row {record_id}: {e}")
            raise
