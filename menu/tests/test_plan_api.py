import unittest
from fastapi.testclient import TestClient

from menu.api import api_run
from menu.api.api_run import app, get_lookup, get_store
from menu.domain.Recipe import Recipe
from menu.infra.Plan_Repository import MemoryPlanStore
from menu.infra.Recipe_Lookup import LocalRecipeLookup
from menu.utilities.errors import RecipeLookupError


def recipes():
    plats = [Recipe(id=f"p{i}", title=f"Plat {i}", category="plat", servings=4, ingredients=("1 kg farine",))
             for i in range(6)]
    desserts = [Recipe(id=f"d{i}", title=f"Dessert {i}", category="dessert", servings=2, ingredients=("sel",))
                for i in range(6)]
    brunches = [Recipe(id=f"b{i}", title=f"Brunch {i}", category="brunch", servings=2, ingredients=("2 oeufs",))
                for i in range(3)]
    return plats + desserts + brunches


class CountingStore(MemoryPlanStore):
    def __init__(self, document=None):
        super().__init__(document)
        self.loads = 0

    def load(self, today=None):
        self.loads += 1
        return super().load(today)


class BrokenLookup:
    def fetch_random(self, count, category, exclude_ids):
        raise RecipeLookupError("recipe API unreachable")


class TestPlanAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.store = CountingStore({"startDate": "2024-03-04", "dayCount": 2,
                                     "activeCategories": ["plat", "dessert"]})
        self.lookup = LocalRecipeLookup(recipes(), seed=7)
        app.dependency_overrides[get_store] = lambda: self.store
        app.dependency_overrides[get_lookup] = lambda: self.lookup

    def tearDown(self):
        app.dependency_overrides.clear()

    def generate(self):
        resp = self.client.post('/api/plan/generate')
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def test_first_visit_generates_once(self):
        resp = self.client.get('/api/plan')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(len(data['menuDays']), 2)
        self.assertEqual(data['endDate'], '2024-03-05')
        self.assertEqual(data['dailyCategories'], ['plat', 'dessert'])
        self.assertEqual(data['shortfall'], {})
        self.assertEqual(self.store.saves, 1)

        again = self.client.get('/api/plan').json()
        self.assertEqual(again['menuDays'], data['menuDays'])
        self.assertEqual(self.store.saves, 1)

    def test_generate_fills_every_slot(self):
        data = self.generate()
        self.assertEqual(data['filled'], 8)
        day = data['menuDays'][0]
        self.assertEqual(set(day['lunch']), {'plat', 'dessert'})
        self.assertEqual(day['lunch']['plat']['selectedServings'], 4)

    def test_day_lock_survives_generation(self):
        first = self.generate()
        resp = self.client.post('/api/plan/locks/day', json={'day_index': 0})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['lockedDays'], {'0': True})

        second = self.generate()
        self.assertEqual(second['menuDays'][0], first['menuDays'][0])

        cleared = self.client.post('/api/plan/locks/clear').json()
        self.assertEqual(cleared['lockedDays'], {})

    def test_slot_lock_toggle(self):
        self.generate()
        body = {'day_index': 1, 'meal': 'dinner', 'category': 'Dessert'}
        locked = self.client.post('/api/plan/locks/slot', json=body).json()
        self.assertEqual(locked['lockedSlots'], {'1|dinner|dessert': True})
        unlocked = self.client.post('/api/plan/locks/slot', json=body).json()
        self.assertEqual(unlocked['lockedSlots'], {})

    def test_lock_validation(self):
        self.assertEqual(self.client.post('/api/plan/locks/slot', json={'day_index': 0, 'meal': 'lunch'}).status_code, 422)
        self.assertEqual(self.client.post('/api/plan/locks/day', json={'day_index': 5}).status_code, 404)

    def test_regenerate_slot(self):
        before = self.generate()
        resp = self.client.post('/api/plan/slots/regenerate', json={'day_index': 0, 'meal': 'lunch', 'category': 'plat'})
        self.assertEqual(resp.status_code, 200)
        after = resp.json()
        self.assertIsNotNone(after['menuDays'][0]['lunch']['plat'])
        self.assertEqual(after['menuDays'][1], before['menuDays'][1])

    def test_regenerate_unknown_slot(self):
        self.generate()
        resp = self.client.post('/api/plan/slots/regenerate', json={'day_index': 0, 'meal': 'lunch', 'category': 'apero'})
        self.assertEqual(resp.status_code, 404)

    def test_disable_meal(self):
        self.generate()
        data = self.client.post('/api/plan/meals', json={'day_index': 1, 'meal': 'dinner', 'enabled': False}).json()
        day = data['menuDays'][1]
        self.assertNotIn('dinner', day)
        self.assertFalse(day['enabledMeals']['dinner'])

    def test_servings_change_scales_shopping_list(self):
        self.generate()
        self.assertEqual(self.client.get('/api/shopping-list').json()['items'], ['4 kg farine', 'sel'])

        resp = self.client.post('/api/plan/servings',
                                json={'day_index': 0, 'meal': 'lunch', 'category': 'plat', 'servings': 8})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['menuDays'][0]['lunch']['plat']['selectedServings'], 8)

        shopping = self.client.get('/api/shopping-list').json()
        self.assertEqual(shopping['items'], ['5 kg farine', 'sel'])
        self.assertEqual(shopping['count'], 2)
        self.assertEqual((shopping['startDate'], shopping['endDate']), ('2024-03-04', '2024-03-05'))

    def test_servings_on_empty_slot(self):
        resp = self.client.post('/api/plan/servings',
                                json={'day_index': 0, 'meal': 'lunch', 'category': 'plat', 'servings': 3})
        self.assertEqual(resp.status_code, 404)

    def test_update_settings(self):
        self.generate()
        resp = self.client.put('/api/plan/settings',
                               json={'start_date': '2024-04-01', 'day_count': 1, 'categories': ['brunch', 'boisson']})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['dayCount'], 1)
        self.assertEqual(len(data['menuDays']), 1)
        self.assertEqual(data['menuDays'][0]['date'], '2024-04-01')
        self.assertEqual(data['activeCategories'], ['brunch'])
        self.assertTrue(data['hasBrunch'])
        self.assertEqual(data['dailyCategories'], [])

        regenerated = self.generate()
        self.assertIsNotNone(regenerated['menuDays'][0]['brunch'])
        self.assertEqual(self.client.get('/api/shopping-list').json()['items'], ['2 oeufs'])

    def test_settings_validation(self):
        self.assertEqual(self.client.put('/api/plan/settings', json={'day_count': 30}).status_code, 422)

    def test_lookup_failure_returns_502(self):
        app.dependency_overrides[get_lookup] = lambda: BrokenLookup()
        resp = self.client.post('/api/plan/generate')
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()['detail'], "Impossible de générer des menus pour le moment.")
        self.assertEqual(self.store.saves, 0)

    def test_concurrent_generation_is_rejected(self):
        api_run._generation_lock.acquire()
        try:
            resp = self.client.post('/api/plan/generate')
        finally:
            api_run._generation_lock.release()
        self.assertEqual(resp.status_code, 409)

    def test_busy_regeneration_does_not_read_the_plan(self):
        self.generate()
        loads = self.store.loads
        api_run._generation_lock.acquire()
        try:
            resp = self.client.post('/api/plan/slots/regenerate',
                                    json={'day_index': 0, 'meal': 'lunch', 'category': 'plat'})
            generate = self.client.post('/api/plan/generate')
        finally:
            api_run._generation_lock.release()
        self.assertEqual((resp.status_code, generate.status_code), (409, 409))
        self.assertEqual(self.store.loads, loads)
        self.assertEqual(self.store.saves, 1)


if __name__ == '__main__':
    unittest.main()
