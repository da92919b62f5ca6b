"""CLI context management for database connections and shared state."""

from dataclasses import dataclass, field

from attendql.core.config import Settings
from attendql.core.connection import DatabaseConnection
from attendql.core.engine import QuestionPipeline
from attendql.translation.openai import OpenAIGateway


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages connection and pipeline lifecycle and output preferences.
    """

    database_url: str
    echo: bool
    json_output: bool
    _connection: DatabaseConnection | None = field(default=None, init=False, repr=False)
    _pipeline: QuestionPipeline | None = field(default=None, init=False, repr=False)

    def get_connection(self) -> DatabaseConnection:
        """Get or create the store connection (lazy initialization).

        Returns:
            DatabaseConnection instance
        """
        if self._connection is None:
            self._connection = DatabaseConnection(self.database_url, echo=self.echo)
        return self._connection

    def get_pipeline(self) -> QuestionPipeline:
        """Get or create the question pipeline (lazy initialization).

        Returns:
            QuestionPipeline instance
        """
        if self._pipeline is None:
            settings = Settings.from_env(self.database_url)
            self._pipeline = QuestionPipeline(
                self.get_connection(), OpenAIGateway.from_settings(settings)
            )
        return self._pipeline

    def close(self) -> None:
        """Close the store connection if open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self._pipeline = None
