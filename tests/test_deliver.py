"""Tests for warble.routing.deliver — scope-relative delivery callbacks."""

from warble.routing.deliver import NullDeliver, ScopedDeliver


class TestScopedDeliver:
    def test_relative_action(self) -> None:
        calls: list[tuple] = []
        deliver = ScopedDeliver(lambda action, data: calls.append((action, data)), "/prefix")

        deliver("relative", {"data": 1})

        assert calls == [("/prefix/relative", {"data": 1})]

    def test_absolute_action(self) -> None:
        calls: list[tuple] = []
        deliver = ScopedDeliver(lambda action, data: calls.append((action, data)), "/prefix")

        deliver("/elsewhere")

        assert calls == [("/elsewhere", {})]

    def test_returns_parent_result(self) -> None:
        deliver = ScopedDeliver(lambda action, data: action.upper(), "/")
        assert deliver("a") == "/A"

    def test_wait(self) -> None:
        calls: list[tuple] = []

        class Parent:
            def __call__(self, action, data):
                raise AssertionError("not expected")

            def wait(self):
                return lambda action, data: calls.append((action, data))

        resolve = ScopedDeliver(Parent(), "/prefix").wait()
        resolve("later", {"n": 1})

        assert calls == [("/prefix/later", {"n": 1})]

    def test_nested_scopes(self) -> None:
        calls: list[tuple] = []
        outer = ScopedDeliver(lambda action, data: calls.append((action, data)), "/")
        inner = ScopedDeliver(outer, "/shop")

        inner("cart")

        assert calls == [("/shop/cart", {})]


class TestNullDeliver:
    def test_drops_everything(self) -> None:
        deliver = NullDeliver()
        assert deliver("anything", {"a": 1}) is None
        assert deliver.wait()("later") is None
