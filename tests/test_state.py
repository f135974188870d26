import unittest

from weatherdish.recommender import SelectionSession
from weatherdish.state import DEFAULT_MAX_SESSIONS, SelectionRegistry


class SelectionRegistryTestCase(unittest.TestCase):
    def test_default_cap(self):
        self.assertEqual(SelectionRegistry().max_sessions, DEFAULT_MAX_SESSIONS)

    def test_size_stays_under_cap(self):
        registry = SelectionRegistry(max_sessions=3)
        for i in range(50):
            registry.put(f"client-{i}", SelectionSession())
        self.assertEqual(len(registry), 3)
        self.assertIn("client-49", registry)
        self.assertNotIn("client-0", registry)

    def test_least_recently_used_is_evicted(self):
        registry = SelectionRegistry(max_sessions=2)
        first = SelectionSession()
        registry.put("a", first)
        registry.put("b", SelectionSession())
        self.assertIs(registry.get("a"), first)
        registry.put("c", SelectionSession())
        self.assertIn("a", registry)
        self.assertNotIn("b", registry)

    def test_put_existing_does_not_grow(self):
        registry = SelectionRegistry(max_sessions=2)
        registry.put("a", SelectionSession())
        registry.put("a", SelectionSession())
        self.assertEqual(len(registry), 1)
        self.assertIsNone(registry.get("missing"))


if __name__ == '__main__':
    unittest.main()
