from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import get_session_maker
from app.core.exceptions import AppError, DatabaseError
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseService(ABC):
    """Base class for application services.

    Provides a standardized execution flow with validation and error handling.
    Services open their own sessions from ``session_maker`` and own the
    transaction boundary; repositories only flush.
    """

    def __init__(self, session_maker: Optional[async_sessionmaker[AsyncSession]] = None):
        """Initialize the service.

        Args:
            session_maker: Session factory; defaults to the process-wide one
        """
        self._session_maker = session_maker
        self.logger = LOGGER

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = get_session_maker()
        return self._session_maker

    async def execute(self, *args, **kwargs) -> Any:
        """Execute the service logic.

        This template method handles:
        1. Input validation
        2. Core logic execution
        3. Standardized error handling

        Raises:
            AppError: If execution fails
        """
        try:
            self.validate(*args, **kwargs)

            return await self.run(*args, **kwargs)

        except AppError:
            raise

        except SQLAlchemyError as e:
            self.logger.error(
                f"Database error during service execution: {str(e)}",
                exc_info=True,
                extra={"service": self.__class__.__name__},
            )
            raise DatabaseError(f"Database operation failed: {str(e)}", original_error=e)

        except Exception as e:
            self.logger.error(
                f"Service execution failed: {str(e)}",
                exc_info=True,
                extra={"service": self.__class__.__name__},
            )
            raise AppError(f"Service execution failed: {str(e)}", original_error=e)

    def validate(self, *args, **kwargs):
        """Validate service input.

        Override this method to implement custom validation logic.

        Raises:
            ValidationError: If input is invalid
        """
        pass

    @abstractmethod
    async def run(self, *args, **kwargs) -> Any:
        """Run the core service logic.

        Must be implemented by subclasses.
        """
        pass
