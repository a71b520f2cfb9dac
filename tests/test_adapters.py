"""Tests for the calling-convention adapters."""

import asyncio

import pytest

from sluice import FieldRule, ValidationEngine
from sluice.adapters import connect, context, resolver
from sluice.errors import BadRequestError, ServerError
from sluice.kinds import any_, integer, string


NAME_RULES = [
    FieldRule("body.name", string().equals("Test Name", "String should equal 'Test Name'")),
]


class Recorder:
    """Callable that records the arguments it was called with."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


class Context:
    """Context object with a req and a throw() that records its arguments."""

    def __init__(self, req, raise_on_throw=False):
        self.req = req
        self.thrown = []
        self._raise = raise_on_throw

    def throw(self, status, payload=None):
        self.thrown.append((status, payload))
        if self._raise:
            raise RuntimeError(f"HTTP {status}")


def explode(v, key, root):
    raise RuntimeError("database down")


@pytest.fixture
def engine():
    return ValidationEngine()


# =============================================================================
# connect
# =============================================================================


class TestConnect:
    @pytest.mark.asyncio
    async def test_success_calls_next_without_args(self, engine):
        next_fn = Recorder()
        middleware = connect(engine, NAME_RULES)
        await middleware({"body": {"name": "Test Name", "age": 24}}, None, next_fn)
        assert next_fn.calls == [()]

    @pytest.mark.asyncio
    async def test_failure_passes_payload(self, engine):
        next_fn = Recorder()
        middleware = engine.connect(NAME_RULES)
        await middleware({"body": {"name": "Another name"}}, None, next_fn)
        assert next_fn.calls == [("String should equal 'Test Name'",)]

    @pytest.mark.asyncio
    async def test_false_failure_becomes_400(self, engine):
        next_fn = Recorder()
        middleware = connect(engine, [FieldRule("body.name", string())])
        await middleware({"body": {}}, None, next_fn)
        assert next_fn.calls == [(400,)]

    @pytest.mark.asyncio
    async def test_exception_becomes_500(self, engine):
        next_fn = Recorder()
        middleware = connect(engine, [FieldRule("body", any_().custom(explode))])
        await middleware({"body": {}}, None, next_fn)
        assert next_fn.calls == [(500,)]

    @pytest.mark.asyncio
    async def test_async_next_is_awaited(self, engine):
        calls = []

        async def next_fn(*args):
            calls.append(args)

        await connect(engine, NAME_RULES)({"body": {"name": "Test Name"}}, None, next_fn)
        assert calls == [()]

    @pytest.mark.asyncio
    async def test_async_lookup_rules(self, engine):
        users = ["test@mail.de", "test2@mail.de"]

        async def user_exists(email):
            await asyncio.sleep(0.01)
            return email in users

        async def unique_email(v, key, root):
            if await user_exists(v):
                return "Email already signed up"
            return True

        middleware = connect(engine, [
            FieldRule("body.email", string().custom(unique_email)),
            FieldRule("body.age", integer().optional().min(18, "18+")),
        ])

        next_fn = Recorder()
        await middleware({"body": {"email": "doesntexist@mail.de"}}, None, next_fn)
        await middleware({"body": {"email": "test@mail.de"}}, None, next_fn)
        await middleware({"body": {"email": "asdasd@mail.de", "age": 15}}, None, next_fn)

        assert next_fn.calls == [(), ("Email already signed up",), ("18+",)]


# =============================================================================
# context
# =============================================================================


class TestContext:
    @pytest.mark.asyncio
    async def test_success_calls_next(self, engine):
        next_fn = Recorder()
        ctx = Context({"body": {"name": "Test Name"}})
        await context(engine, NAME_RULES)(ctx, next_fn)
        assert next_fn.calls == [()]
        assert ctx.thrown == []

    @pytest.mark.asyncio
    async def test_failure_throws_400(self, engine):
        next_fn = Recorder()
        ctx = Context({"body": {"name": "Another name"}})
        await engine.context(NAME_RULES)(ctx, next_fn)
        assert next_fn.calls == []
        assert ctx.thrown == [(400, "String should equal 'Test Name'")]

    @pytest.mark.asyncio
    async def test_missing_req_fails(self, engine):
        ctx = Context(None)
        await context(engine, NAME_RULES)(ctx, Recorder())
        assert ctx.thrown == [(400, False)]

    @pytest.mark.asyncio
    async def test_exception_throws_500(self, engine):
        ctx = Context({"body": {}})
        await context(engine, [FieldRule("body", any_().custom(explode))])(ctx, Recorder())
        assert len(ctx.thrown) == 1
        status, error = ctx.thrown[0]
        assert status == 500
        assert isinstance(error, RuntimeError)

    @pytest.mark.asyncio
    async def test_raising_throw_keeps_400(self, engine):
        ctx = Context({"body": {"name": "Another name"}}, raise_on_throw=True)
        with pytest.raises(RuntimeError, match="HTTP 400"):
            await context(engine, NAME_RULES)(ctx, Recorder())
        assert ctx.thrown == [(400, "String should equal 'Test Name'")]

    @pytest.mark.asyncio
    async def test_raising_throw_on_exception_is_500(self, engine):
        ctx = Context({"body": {}}, raise_on_throw=True)
        with pytest.raises(RuntimeError, match="HTTP 500"):
            await context(engine, [FieldRule("body", any_().custom(explode))])(ctx, Recorder())
        assert [status for status, _ in ctx.thrown] == [500]


# =============================================================================
# resolver
# =============================================================================


class TestResolver:
    @pytest.mark.asyncio
    async def test_success_calls_resolver(self, engine):
        async def create_user(parent, args, ctx, info):
            return {"id": 1, **args}

        wrapped = resolver(engine, [FieldRule("name", string())], create_user)
        assert await wrapped(None, {"name": "x"}, None, None) == {"id": 1, "name": "x"}

    @pytest.mark.asyncio
    async def test_sync_resolver(self, engine):
        wrapped = engine.resolver([FieldRule("n", integer())], lambda p, a, c, i: a["n"] + 1)
        assert await wrapped(None, {"n": 1}, None, None) == 2

    @pytest.mark.asyncio
    async def test_failure_raises_bad_request_without_payload(self, engine):
        called = []
        wrapped = resolver(
            engine,
            [FieldRule("name", string().min(3, "Name too short"))],
            lambda *args: called.append(args),
        )
        with pytest.raises(BadRequestError) as exc_info:
            await wrapped(None, {"name": "x"}, None, None)
        assert str(exc_info.value) == "BAD_REQUEST"
        assert exc_info.value.to_dict() == {
            "code": "BAD_REQUEST",
            "status": 400,
            "message": "BAD_REQUEST",
        }
        assert called == []

    @pytest.mark.asyncio
    async def test_exception_raises_server_error(self, engine):
        wrapped = resolver(engine, [FieldRule("x", any_().custom(explode))], lambda *a: None)
        with pytest.raises(ServerError) as exc_info:
            await wrapped(None, {"x": 1}, None, None)
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value.__cause__, RuntimeError)
