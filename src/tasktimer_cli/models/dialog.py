"""Modal confirmation dialog with a single-settlement result."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Generator, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from tasktimer_cli.errors import DialogCancelled, ValidationError

logger = logging.getLogger(__name__)

DialogState = Literal["created", "open", "closed"]


class DialogOptions(BaseModel):
    """Recognized dialog options.

    Both snake_case and the camelCase keys (``cancelLabel``, ``onOpen`` ...)
    are accepted. Unknown keys are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    title: str
    content: Any = ""
    dismissible: bool = True
    cancel_label: str = Field(default="Cancel", alias="cancelLabel")
    confirm_label: str = Field(default="Save", alias="confirmLabel")
    on_open: Callable[[], Any] | None = Field(default=None, alias="onOpen")
    on_confirm: Callable[[], Any] | None = Field(default=None, alias="onConfirm")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title cannot be empty")
        return v


class DialogResult:
    """Value that settles exactly once, as a success or a failure.

    Callers either register a callback with :meth:`add_done_callback` or
    ``await`` the result from asyncio code. The first settlement wins;
    later ``resolve``/``reject`` calls return False and change nothing.
    """

    _PENDING = object()

    def __init__(self) -> None:
        self._value: Any = self._PENDING
        self._exception: BaseException | None = None
        self._callbacks: list[Callable[[DialogResult], Any]] = []

    def __repr__(self) -> str:
        if not self.done():
            state = "pending"
        elif self._exception is not None:
            state = f"rejected {self._exception!r}"
        else:
            state = f"resolved {self._value!r}"
        return f"<DialogResult {state}>"

    def done(self) -> bool:
        return self._value is not self._PENDING or self._exception is not None

    def resolve(self, value: Any = True) -> bool:
        if self.done():
            return False
        self._value = value
        self._run_callbacks()
        return True

    def reject(self, exception: BaseException) -> bool:
        if self.done():
            return False
        self._exception = exception
        self._run_callbacks()
        return True

    def result(self) -> Any:
        """Return the value, raise the rejection, or fail if still pending."""
        if not self.done():
            raise RuntimeError("Dialog result is not settled yet")
        if self._exception is not None:
            raise self._exception
        return self._value

    def exception(self) -> BaseException | None:
        if not self.done():
            raise RuntimeError("Dialog result is not settled yet")
        return self._exception

    def add_done_callback(self, fn: Callable[[DialogResult], Any]) -> None:
        """Call *fn* with this result once settled (immediately if it is)."""
        if self.done():
            self._call(fn)
        else:
            self._callbacks.append(fn)

    def _run_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            self._call(fn)

    def _call(self, fn: Callable[[DialogResult], Any]) -> None:
        try:
            fn(self)
        except Exception:
            logger.exception("dialog result callback %r failed", fn)

    def __await__(self) -> Generator[Any, None, Any]:
        if not self.done():
            future = asyncio.get_running_loop().create_future()

            def _wake(_: DialogResult) -> None:
                if not future.done():
                    future.set_result(None)

            self.add_done_callback(_wake)
            yield from future.__await__()
        return self.result()


class Dialog:
    """Modal confirmation request.

    The dialog is a model only; the terminal view renders it and routes key
    presses to :meth:`confirm`, :meth:`cancel` and :meth:`dismiss`.
    """

    def __init__(
        self, options: DialogOptions | Mapping[str, Any] | None = None, **overrides
    ):
        self.options = _build_options(options, overrides)
        self.state: DialogState = "created"
        self.promise = DialogResult()

    def __repr__(self) -> str:
        return f"<Dialog {self.title!r} {self.state} {self.promise!r}>"

    @property
    def title(self) -> str:
        return self.options.title

    @property
    def content(self) -> Any:
        return self.options.content

    @property
    def dismissible(self) -> bool:
        return self.options.dismissible

    @property
    def cancel_label(self) -> str:
        return self.options.cancel_label

    @property
    def confirm_label(self) -> str:
        return self.options.confirm_label

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @property
    def settled(self) -> bool:
        return self.promise.done()

    def open(self) -> Dialog:
        """Show the dialog and run ``on_open``."""
        if self.state == "open":
            return self
        self.state = "open"
        logger.debug("dialog opened: %s", self.title)
        if self.options.on_open is not None:
            self.options.on_open()
        return self

    def close(self) -> None:
        """Hide the dialog without settling its result."""
        if self.state == "open":
            self.state = "closed"

    def confirm(self) -> bool:
        """Run ``on_confirm``, close, and resolve the result with True."""
        if self.settled:
            return False
        if self.options.on_confirm is not None:
            self.options.on_confirm()
        self.state = "closed"
        logger.debug("dialog confirmed: %s", self.title)
        return self.promise.resolve(True)

    def cancel(self) -> bool:
        """Close and reject the result with DialogCancelled.

        Only dismissible dialogs can be cancelled.
        """
        if self.settled or not self.dismissible:
            return False
        self.state = "closed"
        logger.debug("dialog cancelled: %s", self.title)
        return self.promise.reject(DialogCancelled())

    def dismiss(self) -> bool:
        """Backdrop / escape affordance."""
        return self.cancel()


def _build_options(
    options: DialogOptions | Mapping[str, Any] | None, overrides: dict[str, Any]
) -> DialogOptions:
    if isinstance(options, DialogOptions) and not overrides:
        return options
    if isinstance(options, DialogOptions):
        data: dict[str, Any] = options.model_dump()
    else:
        data = dict(options or {})
    data.update(overrides)
    try:
        return DialogOptions.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid dialog options: {e}") from e


def open_dialog(
    options: DialogOptions | Mapping[str, Any] | None = None, **overrides
) -> Dialog:
    """Create a dialog, open it and return it."""
    return Dialog(options, **overrides).open()
