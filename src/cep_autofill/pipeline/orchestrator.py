"""Autofill Orchestrator: the state machine tying resolution, lookup and fill together.

Lifecycle:

    UNINITIALIZED --init()--> LOADING --labels loaded/failed--> IDLE
    IDLE  --tick(): usable fields found------------------------> BOUND
    BOUND --tick(): different code field found (rebind)-------> BOUND
    BOUND --tick(): nothing usable (unbind)--------------------> IDLE
    any   --dispose()----------------------------------------> DISPOSED

Invariant: at most one ListenerBinding exists, and the previous one is always
torn down before a new handler is attached. Ticks are serialized with a busy
flag so an overlapping tick is skipped rather than interleaved.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from cep_autofill.config import Settings, settings as default_settings
from cep_autofill.core.normalize import digits_only
from cep_autofill.core.types import (
    AddressRecord,
    FieldName,
    LabelMap,
    ListenerBinding,
    NotReady,
    OrchestratorState,
    ResolvedFieldSet,
)
from cep_autofill.dom.notify import DomNotifier
from cep_autofill.dom.page import Event, FrameAccessError, Window
from cep_autofill.dom.resolver import resolve, resolve_page
from cep_autofill.observability.logging import get_session_id, new_session_id, session_scope
from cep_autofill.observability.tracing import start_span
from cep_autofill.pipeline.scrubber import scrub_window
from cep_autofill.retrieval.gateway import AddressGateway
from cep_autofill.retrieval.labels import load_label_map

logger = logging.getLogger(__name__)

CEP_LENGTH = 8

LabelSource = Callable[[], Awaitable[LabelMap]]


class Notifier(Protocol):
    def __call__(self, window: Window, text: str, duration: float) -> None: ...


class AutofillOrchestrator:
    """Owns the label map, the single listener binding, and the poll loop for one page."""

    def __init__(
        self,
        window: Window,
        *,
        gateway: AddressGateway | None = None,
        label_source: LabelSource | None = None,
        notifier: Notifier | None = None,
        config: Settings | None = None,
    ) -> None:
        self.window = window
        self.config = config or default_settings
        self.gateway = gateway or AddressGateway.from_settings(self.config)
        self.label_source = label_source or self._default_label_source
        self.notifier = notifier or DomNotifier()

        self.state = OrchestratorState.UNINITIALIZED
        self.labels = LabelMap()
        self.binding: ListenerBinding | None = None
        self._ticking = False
        self._task: asyncio.Task | None = None
        # outcome of the most recent lookup; None until one happens
        self.last_fill: bool | None = None
        # inherits the caller's session (an API request) when there is one
        self.session_id = get_session_id() or new_session_id()

    async def _default_label_source(self) -> LabelMap:
        return await load_label_map(self.config.labels_url, timeout=self.config.label_timeout)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Load translations once. A failed load still ends in IDLE, with resolution disabled."""
        if self.state is not OrchestratorState.UNINITIALIZED:
            return
        self.state = OrchestratorState.LOADING
        await self._load_labels()
        if self.state is OrchestratorState.LOADING:
            self.state = OrchestratorState.IDLE

    async def reload_labels(self) -> None:
        """Retry the translation load, e.g. after a failed startup fetch."""
        if self.state is OrchestratorState.DISPOSED:
            return
        await self._load_labels()

    async def _load_labels(self) -> None:
        with session_scope(self.session_id):
            try:
                self.labels = await self.label_source()
            except Exception:
                logger.exception("Label source raised; field resolution disabled")
                self.labels = LabelMap()
            if self.labels.is_empty:
                logger.error("No label translations available; field resolution disabled")

    async def run(self) -> None:
        """init(), then tick every poll_interval seconds until disposed."""
        await self.init()
        while self.state is not OrchestratorState.DISPOSED:
            await self.tick()
            await asyncio.sleep(self.config.poll_interval)

    def start(self) -> asyncio.Task:
        """Schedule run() on the current loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="cep-autofill-poll")
        return self._task

    async def dispose(self) -> None:
        """Stop polling and detach the listener."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self._unbind()
        self.state = OrchestratorState.DISPOSED

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def tick(self) -> None:
        """Re-scan the page and rebind the code-field listener if it moved."""
        if self.state in (OrchestratorState.UNINITIALIZED, OrchestratorState.LOADING,
                          OrchestratorState.DISPOSED):
            return
        if self._ticking:
            logger.debug("Previous tick still running; skipping")
            return

        self._ticking = True
        with session_scope(self.session_id):
            try:
                self._rescan()
                if self.config.scrub_enabled and self.config.scrub_on_tick:
                    scrub_window(self.window, self.config.scrub_email_suffixes)
                self.window.prune_handles()
            except Exception:
                logger.exception("Tick failed; will retry on the next interval")
            finally:
                self._ticking = False

    def _rescan(self) -> None:
        found = resolve_page(self.labels, self.window, self.config.required_fields)

        if found is not None:
            if self.binding is None or found.cep is not self.binding.element:
                self._bind(found)
            else:
                # same code field; keep the handler but follow re-rendered siblings
                self.binding.fields = found
            return

        if self.binding is not None:
            logger.info("Address inputs disappeared; removing CEP listener")
            self._unbind()
        elif not self.labels.is_empty:
            logger.debug("Address inputs not found; still watching")

    def _bind(self, fields: ResolvedFieldSet) -> None:
        self._unbind()

        element = fields.cep
        binding: ListenerBinding

        async def on_input(event: Event) -> None:
            await self.fill(binding.fields)

        binding = ListenerBinding(element=element, handler=on_input, fields=fields)
        element.add_event_listener(binding.event, on_input)
        self.binding = binding
        self.state = OrchestratorState.BOUND
        logger.info("CEP listener attached in %s", fields.scope.name, extra={"scope": fields.scope.name})

    def _unbind(self) -> None:
        if self.binding is not None:
            self.binding.element.remove_event_listener(self.binding.event, self.binding.handler)
            logger.debug("Previous CEP listener removed")
            self.binding = None
        if self.state is OrchestratorState.BOUND:
            self.state = OrchestratorState.IDLE

    # ------------------------------------------------------------------
    # Fill
    # ------------------------------------------------------------------

    async def fill(self, fields: ResolvedFieldSet) -> bool:
        """Look up the typed CEP and write the address into the sibling fields.

        Returns True only when a record was found and written.
        """
        with session_scope(self.session_id):
            return await self._fill(fields)

    async def _fill(self, fields: ResolvedFieldSet) -> bool:
        code_field = fields.cep
        if code_field is None:
            return False
        code = digits_only(code_field.value)
        if len(code) != CEP_LENGTH:
            return False

        with start_span("autofill", enabled=self.config.tracing_enabled) as span:
            span.set_inputs({"cep": code, "scope": fields.scope.name})
            record = await self.gateway.lookup(code)
            # the page may have re-rendered while the lookup was in flight
            fields = self._live_fields(fields)

            if record is None:
                logger.info("No address data for CEP %s", code, extra={"cep": code})
                self.last_fill = False
                if self.config.clear_on_failure:
                    self._clear(fields)
                span.set_outputs({"filled": False})
                return False

            self._write(fields, record, code)
            self.last_fill = True
            span.set_outputs({"filled": True, "record": record.to_dict()})

        self._confirm()
        if self.config.scrub_enabled:
            scrub_window(self.window, self.config.scrub_email_suffixes)
        return True

    def _live_fields(self, fields: ResolvedFieldSet) -> ResolvedFieldSet:
        """Re-resolve the scope if any field was detached since the last tick."""
        if all(element.is_connected for element in fields.fields.values()):
            return fields

        fresh = resolve(self.labels, fields.scope)
        if isinstance(fresh, NotReady) or fresh.cep is not fields.cep:
            # code field moved too; write only to what is still attached and let the next tick rebind
            logger.debug("Code field re-rendered during fill; skipping detached fields")
            return ResolvedFieldSet(
                fields={name: el for name, el in fields.fields.items() if el.is_connected},
                scope=fields.scope,
            )

        logger.debug("Address fields re-rendered since last tick; re-resolved %s", fields.scope.name,
                     extra={"scope": fields.scope.name})
        if self.binding is not None and self.binding.fields is fields:
            self.binding.fields = fresh
        return fresh

    def _write(self, fields: ResolvedFieldSet, record: AddressRecord, code: str) -> None:
        for name in self.config.autofill_fields:
            element = fields.get(name)
            if element is None:
                continue
            if name is FieldName.NUMBER:
                element.value = self.config.number_overrides.get(code, "")
                logger.debug("Number field %s for CEP %s",
                             "set" if element.value else "cleared", code, extra={"cep": code})
                continue
            element.value = record.value_for(name) or ""
        logger.info("Address filled for CEP %s", code, extra={"cep": code, "scope": fields.scope.name})

    def _clear(self, fields: ResolvedFieldSet) -> None:
        for name in self.config.autofill_fields:
            element = fields.get(name)
            if element is not None:
                element.value = ""

    def _confirm(self) -> None:
        try:
            self.notifier(self.window, self.config.notification_text, self.config.notification_duration)
        except FrameAccessError as e:
            logger.debug("Confirmation not shown: %s", e)
