"""Unit tests for metamark.core: marker attachment, declared markers,
element kinds, definitional markers and attachment errors.
"""
from __future__ import annotations

import logging
import types
from dataclasses import dataclass

import pytest

from metamark.core import (
    Documented,
    DuplicateMarkerError,
    ElementKind,
    Inherited,
    Marker,
    MarkerAttachError,
    MarkerError,
    MarkerTargetError,
    Target,
    attach,
    declared_markers,
    element_kind,
    marker_attributes,
)


# ---------------------------------------------------------------------------
# Marker types used across the tests
# ---------------------------------------------------------------------------


class Alpha(Marker):
    pass


class Beta(Marker):
    pass


class Named(Marker):
    def __init__(self, name: str) -> None:
        self.name = name
        self._cache = None


@dataclass(frozen=True)
class Route(Marker):
    path: str
    methods: tuple[str, ...] = ("GET",)


@Target(ElementKind.FUNCTION)
class OnlyFunctions(Marker):
    pass


@Target(ElementKind.CLASS)
class OnlyClasses(Marker):
    pass


# ===========================================================================
# attach / decorator syntax
# ===========================================================================


class TestAttach:
    def test_decorator_returns_element_unchanged(self) -> None:
        class Plain:
            pass

        assert Alpha()(Plain) is Plain

    def test_attach_returns_element(self) -> None:
        def func() -> None:
            pass

        assert attach(func, Alpha()) is func

    def test_declared_markers_follow_source_order(self) -> None:
        @Alpha()
        @Beta()
        class Both:
            pass

        kinds = [type(m) for m in declared_markers(Both)]
        assert kinds == [Alpha, Beta]

    def test_declared_markers_keep_instances(self) -> None:
        marker = Named("svc")

        @marker
        def func() -> None:
            pass

        assert declared_markers(func) == (marker,)
        assert declared_markers(func)[0] is marker

    def test_attach_non_marker_raises(self) -> None:
        class Plain:
            pass

        with pytest.raises(MarkerAttachError):
            attach(Plain, object())  # type: ignore[arg-type]

    def test_attach_to_immutable_builtin_raises(self) -> None:
        with pytest.raises(MarkerAttachError):
            attach(int, Alpha())

    def test_attach_error_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            attach(int, Alpha())

    def test_attach_error_carries_element(self) -> None:
        with pytest.raises(MarkerAttachError) as info:
            attach(int, Alpha())
        assert info.value.element is int

    def test_duplicate_marker_type_raises(self) -> None:
        @Alpha()
        class Once:
            pass

        with pytest.raises(DuplicateMarkerError) as info:
            attach(Once, Alpha())
        assert info.value.marker_type is Alpha

    def test_duplicate_marker_is_marker_error(self) -> None:
        @Alpha()
        class Once:
            pass

        with pytest.raises(MarkerError):
            Alpha()(Once)

    def test_marker_type_can_carry_itself(self) -> None:
        class Loop(Marker):
            pass

        attach(Loop, Loop())
        assert [type(m) for m in declared_markers(Loop)] == [Loop]

    def test_attach_logs_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        class Logged:
            pass

        with caplog.at_level(logging.DEBUG, logger="metamark.core.markers"):
            attach(Logged, Alpha())
        assert "Alpha" in caplog.text


# ===========================================================================
# declared_markers
# ===========================================================================


class TestDeclaredMarkers:
    def test_unmarked_class_is_empty(self) -> None:
        class Plain:
            pass

        assert declared_markers(Plain) == ()

    def test_subclass_does_not_inherit_markers(self) -> None:
        @Alpha()
        class Parent:
            pass

        class Child(Parent):
            pass

        assert declared_markers(Child) == ()
        assert len(declared_markers(Parent)) == 1

    def test_subclass_markers_do_not_leak_to_parent(self) -> None:
        class Parent:
            pass

        @Beta()
        class Child(Parent):
            pass

        assert declared_markers(Parent) == ()

    def test_none_is_empty(self) -> None:
        assert declared_markers(None) == ()

    def test_object_without_dict_is_empty(self) -> None:
        assert declared_markers(42) == ()

    def test_foreign_markers_attribute_is_ignored(self) -> None:
        class Squatter:
            __markers__ = 5

        assert declared_markers(Squatter) == ()

    def test_method_via_instance_and_class(self) -> None:
        class Service:
            @Alpha()
            def handle(self) -> None:
                pass

        assert len(declared_markers(Service.handle)) == 1
        assert len(declared_markers(Service().handle)) == 1

    def test_classmethod_and_staticmethod(self) -> None:
        class Service:
            @Alpha()
            @classmethod
            def build(cls) -> "Service":
                return cls()

            @Beta()
            @staticmethod
            def helper() -> None:
                pass

        assert [type(m) for m in declared_markers(Service.build)] == [Alpha]
        assert [type(m) for m in declared_markers(Service.helper)] == [Beta]
        assert [type(m) for m in declared_markers(vars(Service)["build"])] == [Alpha]

    def test_property(self) -> None:
        class Model:
            @Alpha()
            @property
            def name(self) -> str:
                return "x"

        assert [type(m) for m in declared_markers(Model.name)] == [Alpha]
        assert Model().name == "x"

    def test_module(self) -> None:
        module = types.ModuleType("fake_marked_module")
        attach(module, Alpha())
        assert [type(m) for m in declared_markers(module)] == [Alpha]


# ===========================================================================
# element_kind
# ===========================================================================


class TestElementKind:
    def test_marker_type(self) -> None:
        assert element_kind(Alpha) is ElementKind.MARKER_TYPE

    def test_class(self) -> None:
        class Plain:
            pass

        assert element_kind(Plain) is ElementKind.CLASS

    def test_function(self) -> None:
        def func() -> None:
            pass

        assert element_kind(func) is ElementKind.FUNCTION

    def test_builtin_function(self) -> None:
        assert element_kind(len) is ElementKind.FUNCTION

    def test_wrapped_methods(self) -> None:
        assert element_kind(classmethod(lambda cls: None)) is ElementKind.FUNCTION
        assert element_kind(staticmethod(lambda: None)) is ElementKind.FUNCTION

    def test_property(self) -> None:
        assert element_kind(property(lambda self: 1)) is ElementKind.PROPERTY

    def test_module(self) -> None:
        assert element_kind(types) is ElementKind.MODULE

    def test_other(self) -> None:
        assert element_kind(42) is ElementKind.OTHER


# ===========================================================================
# marker_attributes and repr
# ===========================================================================


class TestMarkerAttributes:
    def test_plain_marker_public_attributes(self) -> None:
        assert marker_attributes(Named("svc")) == {"name": "svc"}

    def test_dataclass_marker_fields_in_order(self) -> None:
        route = Route("/users", ("GET", "POST"))
        assert list(marker_attributes(route)) == ["path", "methods"]
        assert marker_attributes(route)["path"] == "/users"

    def test_empty_marker(self) -> None:
        assert marker_attributes(Alpha()) == {}

    def test_repr_without_attributes(self) -> None:
        assert repr(Alpha()) == "@Alpha()"

    def test_repr_with_attributes(self) -> None:
        assert repr(Named("svc")) == "@Named(name='svc')"

    def test_dataclass_marker_is_a_decorator(self) -> None:
        @Route("/ping")
        def ping() -> str:
            return "pong"

        assert ping() == "pong"
        assert declared_markers(ping)[0].path == "/ping"


# ===========================================================================
# Definitional markers and Target enforcement
# ===========================================================================


class TestDefinitionalMarkers:
    def test_target_records_kinds(self) -> None:
        target = declared_markers(OnlyFunctions)[0]
        assert isinstance(target, Target)
        assert target.kinds == (ElementKind.FUNCTION,)

    def test_target_allows_listed_kind(self) -> None:
        @OnlyFunctions()
        def func() -> None:
            pass

        assert len(declared_markers(func)) == 1

    def test_target_rejects_other_kind(self) -> None:
        class Plain:
            pass

        with pytest.raises(MarkerTargetError) as info:
            OnlyFunctions()(Plain)
        assert info.value.kind is ElementKind.CLASS
        assert info.value.allowed == (ElementKind.FUNCTION,)
        assert info.value.marker_type is OnlyFunctions

    def test_target_error_message_names_kinds(self) -> None:
        class Plain:
            pass

        with pytest.raises(MarkerTargetError, match="FUNCTION"):
            OnlyFunctions()(Plain)

    def test_class_target_allows_marker_types(self) -> None:
        @OnlyClasses()
        class Composite(Marker):
            pass

        assert [type(m) for m in declared_markers(Composite)] == [OnlyClasses]

    def test_target_itself_only_targets_marker_types(self) -> None:
        def func() -> None:
            pass

        with pytest.raises(MarkerTargetError):
            Target(ElementKind.CLASS)(func)

    def test_documented_only_targets_marker_types(self) -> None:
        class Plain:
            pass

        with pytest.raises(MarkerTargetError):
            Documented()(Plain)

    def test_inherited_on_marker_type(self) -> None:
        @Inherited()
        class Heritable(Marker):
            pass

        assert isinstance(declared_markers(Heritable)[0], Inherited)

    def test_definitional_markers_live_in_reserved_module(self) -> None:
        for marker_type in (Target, Documented, Inherited):
            assert marker_type.__module__ == "metamark.core.definitional"
