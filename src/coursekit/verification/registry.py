"""
Check Registry.

Manages registration and lookup of lesson check implementations.
Supports plugin-style extension for adding new checks.
"""

from typing import Optional

from coursekit.models.base import CheckType
from coursekit.verification.base import LessonCheck


class CheckRegistry:
    """Registry for lesson check implementations.

    Usage:
        registry = CheckRegistry()
        registry.register(CheckType.CODE_SYNTAX, CodeSyntaxCheck)

        check = registry.get(CheckType.CODE_SYNTAX)

        if registry.is_registered(CheckType.ANCHORS):
            ...
    """

    _instance: Optional["CheckRegistry"] = None
    _checks: dict[CheckType, type[LessonCheck]]

    def __new__(cls) -> "CheckRegistry":
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._checks = {}
        return cls._instance

    def register(self, check_type: CheckType, implementation: type[LessonCheck]) -> None:
        """Register a check implementation.

        Args:
            check_type: Type of check being registered
            implementation: LessonCheck subclass
        """
        self._checks[check_type] = implementation

    def unregister(self, check_type: CheckType) -> bool:
        """Unregister a check.

        Returns:
            True if was registered, False otherwise
        """
        return self._checks.pop(check_type, None) is not None

    def get(self, check_type: CheckType) -> LessonCheck:
        """Get a check instance.

        Raises:
            KeyError: If check type not registered
        """
        if check_type not in self._checks:
            raise KeyError(f"Check not registered: {check_type}")
        return self._checks[check_type]()

    def is_registered(self, check_type: CheckType) -> bool:
        return check_type in self._checks

    def registered_types(self) -> list[CheckType]:
        """Registered check types in registration order."""
        return list(self._checks)

    def clear(self) -> None:
        """Remove all registrations. Useful for testing."""
        self._checks.clear()


def get_registry() -> CheckRegistry:
    """Get the global registry with the built-in checks registered."""
    from coursekit.verification.checks import BUILTIN_CHECKS

    registry = CheckRegistry()
    if not registry.registered_types():
        for implementation in BUILTIN_CHECKS:
            registry.register(implementation().check_type, implementation)
    return registry
