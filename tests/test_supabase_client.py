"""Tests for Supabase client initialization."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from app.db.supabase_client import get_supabase_client, reset_supabase_client


@pytest.fixture(autouse=True)
def setup_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("SUPABASE_URL", "https://test-project.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-supabase-key")
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)


class TestGetSupabaseClient:
    """Tests for get_supabase_client function."""

    @patch("app.db.supabase_client.create_client")
    def test_successful_client_creation(self, mock_create_client):
        """Test successful Supabase client creation with valid credentials."""
        mock_client = MagicMock()
        mock_create_client.return_value = mock_client

        client = get_supabase_client()

        assert client is mock_client
        mock_create_client.assert_called_once_with(
            "https://test-project.supabase.co",
            "test-supabase-key"
        )

    @patch("app.db.supabase_client.create_client")
    def test_service_role_key_preferred(self, mock_create_client, monkeypatch):
        """Test the service role key is used when configured."""
        monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")

        get_supabase_client()

        mock_create_client.assert_called_once_with(
            "https://test-project.supabase.co",
            "service-role-key"
        )

    @patch("app.db.supabase_client.create_client")
    def test_client_is_cached(self, mock_create_client):
        """Test the client is created once and reused."""
        first = get_supabase_client()
        second = get_supabase_client()

        assert first is second
        mock_create_client.assert_called_once()

    @patch("app.db.supabase_client.create_client")
    def test_reset_creates_new_client(self, mock_create_client):
        """Test reset_supabase_client drops the cached instance."""
        mock_create_client.side_effect = [MagicMock(), MagicMock()]

        first = get_supabase_client()
        reset_supabase_client()
        second = get_supabase_client()

        assert first is not second
        assert mock_create_client.call_count == 2

    def test_missing_supabase_key(self, monkeypatch):
        """Test that missing SUPABASE_KEY raises ValidationError."""
        monkeypatch.delenv("SUPABASE_KEY")

        with pytest.raises(ValidationError) as exc_info:
            get_supabase_client()

        assert "supabase_key" in str(exc_info.value).lower()

    def test_invalid_supabase_url_not_https(self, monkeypatch):
        """Test that non-HTTPS SUPABASE_URL raises ValidationError."""
        monkeypatch.setenv("SUPABASE_URL", "http://test-project.supabase.co")

        with pytest.raises(ValidationError) as exc_info:
            get_supabase_client()

        assert "https" in str(exc_info.value).lower()

    @patch("app.db.supabase_client.create_client")
    def test_create_client_raises_exception(self, mock_create_client):
        """Test that create_client exceptions are wrapped with clear message."""
        mock_create_client.side_effect = Exception("Connection failed")

        with pytest.raises(ValueError) as exc_info:
            get_supabase_client()

        assert "Failed to create Supabase client" in str(exc_info.value)
        assert "Connection failed" in str(exc_info.value)
