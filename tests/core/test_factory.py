"""
Tests for class location and construction.
"""

import pytest

from pipechain.core.factory import ClassFactory, split_dotted_name, get_default_factory

from stubs import PipeStub, StatusMiddleware, DictContainer, dotted


class Outer:
    class Inner:
        pass


class TestSplitDottedName:
    """Test dotted name parsing."""

    @pytest.mark.parametrize("name,expected", [
        ("pkg.mod.Class", ("pkg.mod", "Class")),
        ("pkg.mod:Class", ("pkg.mod", "Class")),
        ("pkg.mod:Outer.Inner", ("pkg.mod", "Outer.Inner")),
        ("Class", None),
        (".Class", None),
        ("pkg.", None),
    ])
    def test_split(self, name, expected):
        assert split_dotted_name(name) == expected


class TestLocate:
    """Test ClassFactory.locate."""

    def test_class_returned_as_is(self):
        assert ClassFactory().locate(PipeStub) is PipeStub

    def test_dotted_names(self):
        """Test both separators locate the class."""
        factory = ClassFactory()
        assert factory.locate(dotted(PipeStub)) is PipeStub
        assert factory.locate("stubs:PipeStub") is PipeStub

    def test_nested_class(self):
        """Test nested classes are located with either separator."""
        factory = ClassFactory()
        assert factory.locate(f"{__name__}.Outer.Inner") is Outer.Inner
        assert factory.locate(f"{__name__}:Outer.Inner") is Outer.Inner

    @pytest.mark.parametrize("name", [
        "missing.module.Class",
        "stubs.Missing",
        "stubs.dotted",
        "NoModule",
        "",
        42,
        None,
    ])
    def test_not_found(self, name):
        """Test missing modules, attributes and non-classes give None."""
        assert ClassFactory().locate(name) is None

    @pytest.mark.parametrize("name", [
        "broken_stubs.BrokenImportPipe",
        "broken_stubs:BrokenImportPipe",
        "broken_stubs.Outer.Inner",
    ])
    def test_broken_module_raises(self, name):
        """Test a module failing on its own imports is not treated as missing."""
        with pytest.raises(ModuleNotFoundError) as exc_info:
            ClassFactory().locate(name)

        assert exc_info.value.name == "pipechain_missing_dependency"

    def test_broken_module_not_constructible(self):
        """Test exists() surfaces the import failure as well."""
        with pytest.raises(ModuleNotFoundError):
            ClassFactory().exists("broken_stubs.BrokenImportPipe")


class TestMake:
    """Test existence checks and construction."""

    def test_exists(self):
        factory = ClassFactory(DictContainer({"alias": object()}))

        assert factory.exists(PipeStub) is True
        assert factory.exists(dotted(PipeStub)) is True
        assert factory.exists("alias") is True
        assert factory.exists("missing.module.Class") is False
        assert factory.exists(42) is False

    def test_make_constructs_class(self):
        """Test the class is constructed without arguments."""
        assert isinstance(ClassFactory().make(dotted(StatusMiddleware)), StatusMiddleware)

    def test_make_prefers_container(self):
        """Test the container entry wins over importing."""
        entry = StatusMiddleware()
        factory = ClassFactory(DictContainer({dotted(StatusMiddleware): entry}))

        assert factory.make(dotted(StatusMiddleware)) is entry

    def test_container_with_class_keys(self):
        """Test class objects can be container keys."""
        entry = PipeStub()
        factory = ClassFactory(DictContainer({PipeStub: entry}))

        assert factory.make(PipeStub) is entry

    def test_unhashable_name_not_in_container(self):
        """Test unhashable names are not container entries."""
        factory = ClassFactory(DictContainer())
        assert factory.in_container(["list"]) is False

    def test_make_unknown(self):
        """Test unknown names raise LookupError."""
        with pytest.raises(LookupError, match="missing.module.Class"):
            ClassFactory().make("missing.module.Class")

    def test_set_container(self):
        """Test the container can be replaced and cleared."""
        factory = ClassFactory()
        factory.set_container(DictContainer({"alias": 1}))
        assert factory.make("alias") == 1

        factory.set_container(None)
        assert factory.in_container("alias") is False

    def test_default_factory_is_shared(self):
        assert get_default_factory() is get_default_factory()
