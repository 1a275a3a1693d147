"""Type Registry Tests.

Tests for:
- Registering pydantic models and function pairs
- Lookup failures raising UnknownTypeError
- Readers-writer locking under concurrent codec calls
"""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from sceneforge.app.sample import build_sample_world
from sceneforge.core.errors import UnknownTypeError
from sceneforge.core.models.components import BUILTIN_RECORDS, Children, Transform
from sceneforge.core.models.node import Record, type_path
from sceneforge.prefabs.codec import deserialize, serialize
from sceneforge.prefabs.prefab import Prefab
from sceneforge.reflect.registry import (
    ReadWriteLock,
    TypeRegistry,
    create_default_registry,
)


class Velocity(Record):
    x: float = 0.0
    y: float = 0.0


class TypeRegistryTest(unittest.TestCase):
    """Test registration and lookup."""

    def setUp(self) -> None:
        self.registry = TypeRegistry()

    def test_default_registry_has_builtins(self) -> None:
        registry = create_default_registry()
        self.assertEqual(len(registry), len(BUILTIN_RECORDS))
        for record_type in BUILTIN_RECORDS:
            self.assertIn(type_path(record_type), registry)

    def test_resolve_unknown_type(self) -> None:
        with self.assertRaises(UnknownTypeError) as ctx:
            self.registry.resolve("game.Nothing")
        self.assertEqual(ctx.exception.type_path, "game.Nothing")
        self.assertIsNone(self.registry.get("game.Nothing"))

    def test_register_model_derives_codec(self) -> None:
        registration = self.registry.register_model(Velocity)

        self.assertEqual(registration.type_path, type_path(Velocity))
        self.assertEqual(registration.field_schema, {"x": "float", "y": "float"})
        self.assertIs(registration.type, Velocity)

        data = registration.encode(Velocity(x=1.5, y=-2.0))
        self.assertEqual(data, {"x": 1.5, "y": -2.0})
        self.assertEqual(registration.decode(data), Velocity(x=1.5, y=-2.0))

    def test_default_type_path_is_module_qualified(self) -> None:
        self.assertEqual(type_path(Velocity), f"{Velocity.__module__}.Velocity")
        self.assertEqual(type_path(Transform), "sceneforge.Transform")
        self.assertEqual(type_path(Transform()), "sceneforge.Transform")

    def test_register_model_under_explicit_path(self) -> None:
        self.registry.register_model(Velocity, type_path="physics.Velocity")
        self.assertIn("physics.Velocity", self.registry)
        self.assertEqual(self.registry.get_by_type(Velocity).type_path, "physics.Velocity")

    def test_register_function_pair(self) -> None:
        registration = self.registry.register(
            "game.Tag",
            encode=str,
            decode=str,
            field_schema={"value": "str"},
        )
        self.assertIs(self.registry.resolve("game.Tag"), registration)
        self.assertIsNone(registration.type)

    def test_unit_record_decodes_from_null(self) -> None:
        registry = create_default_registry()
        marker = registry.resolve("sceneforge.LeafNode").decode(None)
        self.assertEqual(type_path(marker), "sceneforge.LeafNode")

    def test_unregister(self) -> None:
        self.registry.register_model(Velocity)
        self.registry.unregister(type_path(Velocity))
        self.assertNotIn(type_path(Velocity), self.registry)
        self.assertIsNone(self.registry.get_by_type(Velocity))

    def test_to_dict(self) -> None:
        self.registry.register_model(Children)
        self.assertEqual(self.registry.to_dict(), {"sceneforge.Children": {"nodes": "list[Node]"}})


class ReadWriteLockTest(unittest.TestCase):
    """Test the lock protecting the registry."""

    def test_readers_share_the_lock(self) -> None:
        lock = ReadWriteLock()
        with lock.read():
            acquired = threading.Event()

            def reader() -> None:
                with lock.read():
                    acquired.set()

            thread = threading.Thread(target=reader)
            thread.start()
            self.assertTrue(acquired.wait(timeout=2))
            thread.join(timeout=2)

    def test_writer_waits_for_readers(self) -> None:
        lock = ReadWriteLock()
        written = threading.Event()

        def writer() -> None:
            with lock.write():
                written.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()
        self.assertFalse(written.wait(timeout=0.2))
        lock.release_read()
        self.assertTrue(written.wait(timeout=2))
        thread.join(timeout=2)

    def test_nested_read_does_not_block(self) -> None:
        lock = ReadWriteLock()
        with lock.read():
            with lock.read():
                pass

    def test_registration_waits_for_codec_call(self) -> None:
        registry = create_default_registry()
        registered = threading.Event()

        def register() -> None:
            registry.register_model(Velocity)
            registered.set()

        with registry.read():
            thread = threading.Thread(target=register)
            thread.start()
            self.assertFalse(registered.wait(timeout=0.2))
            self.assertNotIn(type_path(Velocity), registry)
        self.assertTrue(registered.wait(timeout=2))
        thread.join(timeout=2)


class ConcurrentCodecTest(unittest.TestCase):
    """Many loads share one registry."""

    def test_concurrent_round_trips(self) -> None:
        registry = create_default_registry()
        world, root = build_sample_world()
        prefab = Prefab.from_world(world, root, "Test")
        text = serialize(prefab, registry)

        def round_trip(index: int) -> bool:
            if index % 10 == 0:
                registry.register_model(Velocity, type_path=f"physics.Velocity{index}")
            decoded = deserialize(text, registry)
            return decoded == prefab and serialize(decoded, registry) == text

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(round_trip, range(100)))

        self.assertTrue(all(results))
        self.assertEqual(len(registry), len(BUILTIN_RECORDS) + 10)


if __name__ == "__main__":
    unittest.main()
