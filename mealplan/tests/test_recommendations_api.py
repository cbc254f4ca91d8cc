import json
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from mealplan.api import api_ai
from mealplan.api.api_run import app
from mealplan.infra.paths import get_data_dir


class TestRecommendationsAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        app.dependency_overrides[get_data_dir] = lambda: Path(self.tmp.name)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.tmp.cleanup()

    @patch('mealplan.api.api_ai._get_openai_client', return_value=None)
    def test_sample_recommendations_without_key(self, _client):
        resp = self.client.get('/api/meals/recommendations', params={'page_size': 3})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['total'], 3)
        self.assertEqual(data['page'], 1)
        self.assertEqual(data['page_size'], 3)
        self.assertTrue(all(r['id'].startswith('rec-') for r in data['recommendations']))

    @patch('mealplan.api.api_ai._get_openai_client', return_value=None)
    def test_filters(self, _client):
        data = self.client.get('/api/meals/recommendations', params={'cuisine': 'asian'}).json()
        self.assertEqual([r['cuisine'] for r in data['recommendations']], ['Asian', 'Asian'])
        data = self.client.get('/api/meals/recommendations', params={'max_prep_time': 10}).json()
        self.assertTrue(all(r['prepTime'] <= 10 for r in data['recommendations']))
        self.assertEqual(data['total'], 2)

    def test_model_output_parsed(self):
        payload = {'recommendations': [{'name': 'Shakshuka', 'cuisine': 'Middle Eastern', 'prepTime': 10,
                                        'cookTime': 20, 'servings': 2, 'ingredients': []}]}
        client = MagicMock()
        client.responses.create.return_value = SimpleNamespace(
            output_text='```json\n' + json.dumps(payload) + '\n```')
        with patch('mealplan.api.api_ai._get_openai_client', return_value=client):
            data = self.client.get('/api/meals/recommendations', params={'request': 'eggs'}).json()
        self.assertEqual([r['name'] for r in data['recommendations']], ['Shakshuka'])
        prompt = client.responses.create.call_args.kwargs['input']
        self.assertIn('Additional request: eggs', prompt)

    def test_model_failure_falls_back(self):
        client = MagicMock()
        client.responses.create.side_effect = RuntimeError('boom')
        with patch('mealplan.api.api_ai._get_openai_client', return_value=client):
            data = self.client.get('/api/meals/recommendations', params={'page_size': 2}).json()
        self.assertEqual(len(data['recommendations']), 2)

    def test_save_reuses_ingredients(self):
        existing = self.client.post('/api/ingredients', json={'name': 'Chicken Breast'}).json()
        body = dict(api_ai.SAMPLE_RECOMMENDATIONS[0])
        resp = self.client.post('/api/meals/save', json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        meal = resp.json()
        self.assertEqual(meal['source'], 'ai')
        self.assertEqual(meal['prep_time'], 15)
        self.assertEqual(len(meal['ingredients']), 6)
        chicken = [i for i in meal['ingredients'] if i['ingredient_name'] == 'Chicken Breast']
        self.assertEqual(chicken[0]['ingredient_id'], existing['id'])
        names = [i['name'] for i in self.client.get('/api/ingredients').json()]
        self.assertEqual(names.count('Chicken Breast'), 1)
        self.assertIn('Feta Cheese', names)

    def test_save_skips_zero_quantity_without_adding_to_catalog(self):
        body = dict(api_ai.SAMPLE_RECOMMENDATIONS[0])
        body['ingredients'] = body['ingredients'][:1] + [{'name': 'Saffron', 'quantity': 0, 'unit': 'g'}]
        resp = self.client.post('/api/meals/save', json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual([i['ingredient_name'] for i in resp.json()['ingredients']], ['Chicken Breast'])
        names = [i['name'] for i in self.client.get('/api/ingredients').json()]
        self.assertEqual(names, ['Chicken Breast'])


class TestRecommendationParsing(unittest.TestCase):

    def test_recovers_trailing_commas_and_prose(self):
        text = 'Here you go:\n{"recommendations": [{"name": "Soup",},]}\nEnjoy!'
        self.assertEqual(api_ai.parse_recommendations(text), [{'name': 'Soup'}])

    def test_plain_list_and_garbage(self):
        self.assertEqual(api_ai.parse_recommendations('[{"name": "A"}, {"x": 1}]'), [{'name': 'A'}])
        self.assertIsNone(api_ai.parse_recommendations('no json here'))
        self.assertIsNone(api_ai.parse_recommendations(''))

    def test_prompt_contents(self):
        item = SimpleNamespace(ingredient_id='i1', quantity=2.0, unit='')
        principle = SimpleNamespace(name='Low salt', description='')
        prompt = api_ai.build_recommendation_prompt([item], {'i1': 'Eggs'}, [principle], ['Pancakes'], 4)
        self.assertIn('Suggest 4 meals.', prompt)
        self.assertIn('Eggs (2)', prompt)
        self.assertIn('- Low salt', prompt)
        self.assertIn('Pancakes', prompt)


if __name__ == "__main__":
    unittest.main()
