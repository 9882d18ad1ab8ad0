"""Member request pipeline.

Every mutating member request runs the same stages in a fixed order:

    validate -> check uniqueness -> authorize -> assemble -> persist

Stages are skipped when an operation has no use for them (delete has no
body to validate), but never reordered. Each request walks the transitions
declared in ALLOWED_TRANSITIONS and stops at the first failure. Whatever
terminal state a mutating request reaches, exactly one audit entry is handed
to the audit sink for it.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from audit.domain import AuditAction, AuditLogEntry
from audit.ports import AuditSink
from members.application.assembler import EntityAssembler
from members.application.observability import (
    DefaultMemberPipelineProbe,
    MemberPipelineProbe,
)
from members.application.requests import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    MAX_PAGE_SIZE,
    MemberPage,
    MemberRequest,
)
from members.application.uniqueness import UniquenessChecker
from members.domain import (
    ALLOWED_TRANSITIONS,
    Member,
    MemberField,
    MemberId,
    PipelineState,
    SortDirection,
)
from members.ports import (
    AuthorizationError,
    ConflictError,
    IMemberRepository,
    MemberNotFoundError,
    MemberQuery,
    PipelineError,
    ValidationError,
)
from shared_kernel.authorization import (
    Permission,
    PermissionEvaluator,
    Principal,
    actor_name,
)
from shared_kernel.validation import FieldValidator, normalize_identity

MEMBER_ENTITY_TYPE = "Member"

_SORTABLE_FIELDS = {field.value: field for field in MemberField}


def _utc_now() -> datetime:
    return datetime.now(UTC)


def parse_sort(sort: str | None) -> tuple[MemberField, SortDirection]:
    """Parse a "field,direction" sort expression.

    Unknown fields fall back to name; anything other than "desc" sorts
    ascending.
    """
    field_part, _, direction_part = (sort or DEFAULT_SORT).partition(",")
    field = _SORTABLE_FIELDS.get(field_part.strip(), MemberField.NAME)
    direction = (
        SortDirection.DESC
        if direction_part.strip().lower() == SortDirection.DESC.value
        else SortDirection.ASC
    )
    return field, direction


class IllegalTransitionError(RuntimeError):
    """Raised when the pipeline attempts a transition it does not declare."""


class _PipelineRun:
    """Tracks the state of a single request through the pipeline."""

    def __init__(self, operation: str, probe: MemberPipelineProbe) -> None:
        self.operation = operation
        self.state = PipelineState.RECEIVED
        self._probe = probe

    def advance(self, state: PipelineState) -> None:
        if self.state.is_terminal or state not in ALLOWED_TRANSITIONS.get(
            self.state, frozenset()
        ):
            raise IllegalTransitionError(
                f"{self.operation}: {self.state.value} -> {state.value} is not allowed"
            )
        self._probe.state_changed(self.operation, self.state.value, state.value)
        self.state = state

    def terminate(self, state: PipelineState) -> None:
        """Move to a failure state, even one not declared from the current state.

        An undeclared failure transition is reported but still taken, so the
        original error keeps propagating and is still audited.
        """
        try:
            self.advance(state)
        except IllegalTransitionError:
            self._probe.unexpected_failure_state(
                self.operation, self.state.value, state.value
            )
            self.state = state


class MemberRequestPipeline:
    """Runs member create, update, delete and read requests.

    Collaborators are injected so tests can substitute any of them. The
    pipeline itself holds no per-request state and can be shared.
    """

    def __init__(
        self,
        repository: IMemberRepository,
        validator: FieldValidator,
        uniqueness: UniquenessChecker,
        evaluator: PermissionEvaluator,
        assembler: EntityAssembler,
        audit_sink: AuditSink,
        probe: MemberPipelineProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._validator = validator
        self._uniqueness = uniqueness
        self._evaluator = evaluator
        self._assembler = assembler
        self._audit_sink = audit_sink
        self._probe = probe or DefaultMemberPipelineProbe()
        self._clock = clock

    async def register_member(
        self,
        request: MemberRequest,
        principal: Principal | None,
        ip_address: str | None = None,
    ) -> Member:
        """Create a new member.

        Raises:
            ValidationError: One or more fields are invalid
            ConflictError: The email is already registered
            DependencyUnavailableError: The member store cannot be reached
            AuthorizationError: The principal lacks member:create
            PersistFailedError: The store rejected the write
        """
        run = self._start("register_member")
        try:
            run.advance(PipelineState.VALIDATING)
            self._validate(request)

            run.advance(PipelineState.UNIQUENESS_CHECKING)
            await self._ensure_email_unique(request)

            run.advance(PipelineState.AUTHORIZING)
            self._authorize(principal, Permission.MEMBER_CREATE)

            run.advance(PipelineState.ASSEMBLING)
            member = self._assembler.assemble_new(request, principal)

            run.advance(PipelineState.PERSISTING)
            await self._repository.save(member)
        except PipelineError as e:
            self._fail(run, e, AuditAction.CREATE, None, principal, ip_address)
            raise

        self._complete(run, AuditAction.CREATE, member.id.value, principal, ip_address)
        return member

    async def update_member(
        self,
        member_id: str,
        request: MemberRequest,
        principal: Principal | None,
        ip_address: str | None = None,
    ) -> Member:
        """Replace the fields of an existing member.

        The member may keep its own email; any other member holding the
        email is a conflict.

        Raises:
            ValidationError, ConflictError, DependencyUnavailableError,
            AuthorizationError, MemberNotFoundError, PersistFailedError
        """
        run = self._start("update_member")
        target = MemberId(value=member_id)
        try:
            run.advance(PipelineState.VALIDATING)
            self._validate(request)

            run.advance(PipelineState.UNIQUENESS_CHECKING)
            await self._ensure_email_unique(request, exclude_id=target)

            run.advance(PipelineState.AUTHORIZING)
            self._authorize(principal, Permission.MEMBER_UPDATE)
            existing = await self._repository.get_by_id(target)
            if existing is None:
                raise MemberNotFoundError(member_id)

            run.advance(PipelineState.ASSEMBLING)
            member = self._assembler.assemble_update(existing, request, principal)

            run.advance(PipelineState.PERSISTING)
            await self._repository.save(member)
        except PipelineError as e:
            self._fail(run, e, AuditAction.UPDATE, member_id, principal, ip_address)
            raise

        self._complete(run, AuditAction.UPDATE, member_id, principal, ip_address)
        return member

    async def delete_member(
        self,
        member_id: str,
        principal: Principal | None,
        ip_address: str | None = None,
    ) -> None:
        """Delete a member.

        Raises:
            AuthorizationError: The principal lacks member:delete
            MemberNotFoundError: No member has this id
            DependencyUnavailableError, PersistFailedError
        """
        run = self._start("delete_member")
        try:
            run.advance(PipelineState.AUTHORIZING)
            self._authorize(principal, Permission.MEMBER_DELETE)

            run.advance(PipelineState.PERSISTING)
            deleted = await self._repository.delete_by_id(MemberId(value=member_id))
            if not deleted:
                raise MemberNotFoundError(member_id)
        except PipelineError as e:
            self._fail(run, e, AuditAction.DELETE, member_id, principal, ip_address)
            raise

        self._complete(run, AuditAction.DELETE, member_id, principal, ip_address)

    async def get_member(self, member_id: str, principal: Principal | None) -> Member:
        """Fetch one member. Reads are not audited.

        Raises:
            AuthorizationError: The principal lacks member:read
            MemberNotFoundError: No member has this id
        """
        self._authorize(principal, Permission.MEMBER_READ)
        member = await self._repository.get_by_id(MemberId(value=member_id))
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    async def list_members(
        self,
        principal: Principal | None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        sort: str | None = DEFAULT_SORT,
        search: str | None = None,
    ) -> MemberPage:
        """List members a page at a time.

        page is zero-based and clamped to 0; size is clamped to 1..100.
        search matches name, email or phone number case-insensitively.
        """
        self._authorize(principal, Permission.MEMBER_READ)

        page = max(page, 0)
        size = min(max(size, 1), MAX_PAGE_SIZE)
        term = search.strip() if search else None
        sort_field, direction = parse_sort(sort)

        total = await self._repository.count(term or None)
        items = await self._repository.list(
            MemberQuery(
                search=term or None,
                sort_field=sort_field,
                direction=direction,
                offset=page * size,
                limit=size,
            )
        )
        self._probe.members_listed(actor_name(principal), len(items), total)
        return MemberPage(items=items, total=total, page=page, size=size)

    def _start(self, operation: str) -> _PipelineRun:
        return _PipelineRun(operation, self._probe)

    def _validate(self, request: MemberRequest) -> None:
        errors = self._validator.validate_fields(request.field_values())
        if errors:
            raise ValidationError(errors)

    async def _ensure_email_unique(
        self, request: MemberRequest, exclude_id: MemberId | None = None
    ) -> None:
        email = normalize_identity(request.email or "")
        if not await self._uniqueness.is_unique(MemberField.EMAIL, email, exclude_id):
            raise ConflictError(MemberField.EMAIL.value, email)

    def _authorize(self, principal: Principal | None, required: Permission) -> None:
        roles = principal.roles if principal is not None else ()
        if not self._evaluator.authorize(roles, required):
            raise AuthorizationError(required.value)

    def _complete(
        self,
        run: _PipelineRun,
        action: AuditAction,
        member_id: str,
        principal: Principal | None,
        ip_address: str | None,
    ) -> None:
        run.advance(PipelineState.COMPLETED)
        actor = actor_name(principal)
        self._emit_audit(
            run,
            lambda: AuditLogEntry.success(
                action=action,
                entity_type=MEMBER_ENTITY_TYPE,
                entity_id=member_id,
                principal=actor,
                timestamp=self._clock(),
                ip_address=ip_address,
                details={"state": run.state.value, "operation": run.operation},
            ),
        )
        self._probe.request_completed(run.operation, member_id, actor)

    def _fail(
        self,
        run: _PipelineRun,
        error: PipelineError,
        action: AuditAction,
        member_id: str | None,
        principal: Principal | None,
        ip_address: str | None,
    ) -> None:
        run.terminate(error.state)
        actor = actor_name(principal)
        self._emit_audit(
            run,
            lambda: AuditLogEntry.failure(
                action=action,
                entity_type=MEMBER_ENTITY_TYPE,
                entity_id=member_id,
                principal=actor,
                timestamp=self._clock(),
                error_message=str(error) or error.state.value,
                ip_address=ip_address,
                details={"state": run.state.value, "operation": run.operation},
            ),
        )
        self._probe.request_failed(run.operation, run.state.value, actor, str(error))

    def _emit_audit(
        self, run: _PipelineRun, build_entry: Callable[[], AuditLogEntry]
    ) -> None:
        # The outcome of the request is already decided; auditing cannot change it.
        try:
            self._audit_sink.record(build_entry())
        except Exception as e:
            self._probe.audit_failed(run.operation, run.state.value, str(e))
