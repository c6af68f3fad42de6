"""
Module Builder Tests

Tests for LazyInjectionModule:
- Construction only through define()
- Persistent add / add_transient / override
- Duplicate key rejection (own and parent keys)
- Read-only registrations
"""

import unittest

from lazyinjection import (
    DuplicateDefinitionError,
    InvalidConstructionError,
    LazyInjectionLifeCycle,
    LazyInjectionModule,
    Registration,
    define,
)

from tests.fixtures import CountingFactory


class TestConstruction(unittest.TestCase):
    """Tests for the construction guard"""

    def test_direct_construction_raises(self):
        """LazyInjectionModule() raises InvalidConstructionError"""
        with self.assertRaises(InvalidConstructionError) as ctx:
            LazyInjectionModule()

        self.assertIn("define()", str(ctx.exception))

    def test_direct_construction_with_arguments_raises(self):
        """Passing registrations and parent does not bypass the guard"""
        with self.assertRaises(InvalidConstructionError):
            LazyInjectionModule({}, None)

    def test_define_returns_empty_module(self):
        """define() starts an empty module without parent"""
        module = define()

        self.assertIsInstance(module, LazyInjectionModule)
        self.assertEqual(len(module), 0)
        self.assertIsNone(module.parent)


class TestAdd(unittest.TestCase):
    """Tests for add() and add_transient()"""

    def test_add_returns_new_module(self):
        """add() leaves the receiver unchanged"""
        base = define()
        extended = base.add("a", lambda c: 1)

        self.assertIsNot(base, extended)
        self.assertNotIn("a", base)
        self.assertIn("a", extended)

    def test_add_registers_memoized(self):
        """add() stores a memoized registration"""
        factory = lambda c: 1
        module = define().add("a", factory)

        registration = module.registrations["a"]
        self.assertIs(registration.factory, factory)
        self.assertEqual(registration.lifecycle, LazyInjectionLifeCycle.MEMOIZED)
        self.assertFalse(registration.is_transient)

    def test_add_transient_registers_transient(self):
        """add_transient() stores a transient registration"""
        module = define().add_transient("a", lambda c: 1)

        self.assertTrue(module.registrations["a"].is_transient)

    def test_add_transient_does_not_mutate_factory(self):
        """Transience lives on the registration, not the factory"""
        def factory(c):
            return 1

        define().add_transient("a", factory)

        self.assertFalse(hasattr(factory, "transient"))
        self.assertEqual(define().add("b", factory).registrations["b"],
                         Registration(factory))

    def test_duplicate_key_raises(self):
        """Adding the same key twice raises DuplicateDefinitionError"""
        with self.assertRaises(DuplicateDefinitionError):
            define().add("x", lambda c: 1).add("x", lambda c: 2)

    def test_duplicate_transient_key_raises(self):
        """add_transient() rejects existing keys too"""
        with self.assertRaises(DuplicateDefinitionError):
            define().add("x", lambda c: 1).add_transient("x", lambda c: 2)

    def test_duplicate_parent_key_raises(self):
        """Adding a key the parent container provides raises"""
        parent = define().add("a", lambda c: None).finalize()

        with self.assertRaises(DuplicateDefinitionError):
            parent.create_child().add("a", lambda c: None)

    def test_failed_add_keeps_previous_module(self):
        """A rejected add() does not roll back earlier adds"""
        module = define().add("x", lambda c: 1)

        with self.assertRaises(DuplicateDefinitionError):
            module.add("x", lambda c: 2)

        self.assertEqual(module.finalize().get("x"), 1)


class TestOverride(unittest.TestCase):
    """Tests for override()"""

    def test_override_does_not_affect_original(self):
        """Containers finalized from the original never see the override"""
        original_factory = CountingFactory(lambda: {"value": "original"})
        override_factory = CountingFactory(lambda: {"value": "overridden"})

        original = define().add("A", original_factory)
        overridden = original.override("A", override_factory)

        self.assertEqual(original.finalize().get("A")["value"], "original")
        self.assertEqual(overridden.finalize().get("A")["value"], "overridden")
        self.assertEqual(original_factory.calls, 1)
        self.assertEqual(override_factory.calls, 1)

    def test_override_unknown_key_adds_it(self):
        """override() on a new key behaves like an unchecked add"""
        module = define().override("a", lambda c: 1)

        self.assertEqual(module.finalize().get("a"), 1)

    def test_override_parent_key_does_not_raise(self):
        """override() may shadow a key provided by the parent"""
        parent = define().add("shared", lambda c: "parent").finalize()

        child = parent.create_child().override("shared", lambda c: "child")

        self.assertEqual(child.finalize().get("shared"), "child")
        self.assertEqual(parent.get("shared"), "parent")

    def test_override_drops_transient_lifecycle(self):
        """Overriding a transient key without transient=True memoizes it"""
        module = define().add_transient("a", lambda c: object())
        overridden = module.override("a", lambda c: object())

        self.assertFalse(overridden.registrations["a"].is_transient)
        container = overridden.finalize()
        self.assertIs(container.get("a"), container.get("a"))

    def test_override_transient_flag(self):
        """override(transient=True) registers a transient factory"""
        module = define().add("a", lambda c: object())
        overridden = module.override("a", lambda c: object(), transient=True)

        container = overridden.finalize()
        self.assertIsNot(container.get("a"), container.get("a"))
        self.assertFalse(module.registrations["a"].is_transient)

    def test_divergent_overrides_from_one_base(self):
        """One base module can feed several independent override chains"""
        base = define().add("a", lambda c: "base").add("b", lambda c: c.get("a"))

        first = base.override("a", lambda c: "first")
        second = base.override("a", lambda c: "second")

        self.assertEqual(first.finalize().get("b"), "first")
        self.assertEqual(second.finalize().get("b"), "second")
        self.assertEqual(base.finalize().get("b"), "base")


class TestRegistrations(unittest.TestCase):
    """Tests for the read-only registration view"""

    def test_registrations_are_read_only(self):
        """Registrations cannot be modified through the mapping"""
        module = define().add("a", lambda c: 1)

        with self.assertRaises(TypeError):
            module.registrations["b"] = Registration(lambda c: 2)

    def test_has_includes_parent_keys(self):
        """has() looks through the parent container"""
        parent = define().add("a", lambda c: 1).finalize()
        child = parent.create_child().add("b", lambda c: 2)

        self.assertTrue(child.has("a"))
        self.assertTrue(child.has("b"))
        self.assertFalse(child.has("c"))
        self.assertEqual(list(child), ["b"])

    def test_repr_lists_keys(self):
        """repr() shows the own keys"""
        module = define().add("a", lambda c: 1).add("b", lambda c: 2)

        self.assertEqual(repr(module), "LazyInjectionModule([a, b])")


if __name__ == '__main__':
    unittest.main()
