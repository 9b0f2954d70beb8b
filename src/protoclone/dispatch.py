"""Super dispatch: calling the next implementation up the delegation chain.

Every object that dispatches gets a ``SuperCursor`` naming the level that
answers its next super call. A dispatch advances the cursor one level for
the duration of the call, so a super call made by the callee continues
upward, and restores it afterwards on every exit path.
"""

from __future__ import annotations

import functools
import logging
import types
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Callable

from protoclone.host import ProtoObject, find_property, get_parent, get_property, read_record

logger = logging.getLogger(__name__)


class NoSuchMethodError(AttributeError):
    """Raised when a super dispatch finds no implementation above the caller."""


class SuperCursor:
    """Position of the next super call for one object."""

    __slots__ = ("position",)

    def __init__(self, position: ProtoObject | None) -> None:
        self.position = position

    @contextmanager
    def advance(self) -> Iterator[ProtoObject | None]:
        """Step one level up for the duration of the block.

        Yields the level that answers the current call.
        """
        saved = self.position
        self.position = get_parent(saved) if saved is not None else None
        try:
            yield saved
        finally:
            self.position = saved

    @contextmanager
    def reinstate(self, captured: ProtoObject | None) -> Iterator[None]:
        """Temporarily move the cursor back to a previously captured level."""
        saved = self.position
        self.position = captured
        try:
            yield
        finally:
            self.position = saved

    def __repr__(self) -> str:
        return f"SuperCursor({self.position!r})"


def cursor_for(obj: ProtoObject) -> SuperCursor:
    """Return the cursor of ``obj``, creating it on first use.

    A new cursor starts at the grandparent: the caller is already running
    a method found on the parent level.
    """
    cursor = obj.__cursor__
    if cursor is None:
        parent = get_parent(obj)
        cursor = SuperCursor(get_parent(parent) if parent is not None else None)
        object.__setattr__(obj, "__cursor__", cursor)
    return cursor


def apply_super(
    obj: ProtoObject,
    method_name: str | list[Any] | tuple[Any, ...] = "constructor",
    args: list[Any] | tuple[Any, ...] = (),
    kwargs: dict[str, Any] | None = None,
) -> Any:
    """Call ``method_name`` of the next level up with ``obj`` as receiver.

    A list or tuple in place of ``method_name`` is taken as the arguments of
    the super constructor.

    Raises:
        NoSuchMethodError: If no remaining level defines ``method_name``.
    """
    if not isinstance(method_name, str):
        if isinstance(method_name, (list, tuple)):
            args = method_name
        method_name = "constructor"

    cursor = cursor_for(obj)
    with cursor.advance() as level:
        _, record = find_property(level, method_name)
        if record is None:
            raise NoSuchMethodError(
                f"No super implementation of '{method_name}' above {level!r}"
            )
        logger.debug("super dispatch of %r", method_name)
        method = read_record(record, obj)
        return method(*args, **(kwargs or {}))


def call_super(obj: ProtoObject, method_name: str, *args: Any, **kwargs: Any) -> Any:
    """Variadic form of ``apply_super``."""
    return apply_super(obj, method_name, args, kwargs)


def create_super_safe_callback(
    obj: ProtoObject,
    function_or_name: Callable[..., Any] | str,
    bound_self: Any = None,
) -> Callable[..., Any]:
    """Wrap a callback so super calls made from it resolve as they would now.

    The cursor of ``obj`` is captured when the wrapper is created and
    reinstated while the wrapper runs, which keeps super dispatch correct in
    callbacks that run after the method that scheduled them has returned.

    Args:
        obj: The object whose cursor the callback relies on.
        function_or_name: A function, or the name of a method of ``obj``.
        bound_self: Receiver to bind the function or named method to.
            Defaults to ``obj`` for named methods.
    """
    if isinstance(function_or_name, str):
        fn = get_property(obj, function_or_name, receiver=bound_self)
    elif bound_self is not None and isinstance(function_or_name, types.FunctionType):
        fn = types.MethodType(function_or_name, bound_self)
    else:
        fn = function_or_name

    cursor = cursor_for(obj)
    captured = cursor.position

    @functools.wraps(fn)
    def super_safe_callback(*args: Any, **kwargs: Any) -> Any:
        if cursor.position is captured:
            return fn(*args, **kwargs)
        with cursor.reinstate(captured):
            return fn(*args, **kwargs)

    return super_safe_callback
