#!/usr/bin/env python3
"""
Test Suite for the LiteView web viewer

Run: python -m pytest liteview/tests/test_web.py -v
"""

import io
import os
import shutil
import sqlite3
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from liteview import Session
from liteview.web import create_app


def make_image(directory):
    path = os.path.join(directory, "shop.db")
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, total REAL)")
    conn.execute("INSERT INTO users VALUES (1, 'Alice')")
    conn.execute("INSERT INTO users VALUES (2, 'Bob')")
    conn.commit()
    conn.close()
    with open(path, 'rb') as f:
        return f.read()


class WebTestCase(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.image = make_image(self.test_dir)
        self.session = Session()
        self.app = create_app({'TESTING': True}, session=self.session)
        self.client = self.app.test_client()

    def tearDown(self):
        self.session.close()
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def upload(self, data, filename="shop.db"):
        return self.client.post(
            '/open',
            data={'database': (io.BytesIO(data), filename)},
            content_type='multipart/form-data',
            follow_redirects=True,
        )


class TestPages(WebTestCase):
    """Test the HTML viewer"""

    def test_index_without_database(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'SQLite Database Viewer', response.data)
        self.assertNotIn(b'Execute Query', response.data)

    def test_upload_lists_tables(self):
        response = self.upload(self.image)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'Loaded shop.db (2 table(s)).', response.data)
        self.assertIn(b'<option value="users"', response.data)
        self.assertIn(b'<option value="orders"', response.data)
        self.assertEqual(self.session.current_tables(), ("users", "orders"))

    def test_upload_without_file(self):
        response = self.client.post('/open', data={}, follow_redirects=True)
        self.assertIn(b'Please choose a database file.', response.data)

    def test_upload_rejects_other_extensions(self):
        response = self.upload(self.image, filename="shop.csv")
        self.assertIn(b'Unsupported file type: shop.csv', response.data)
        self.assertFalse(self.session.is_loaded)

    def test_invalid_upload_keeps_previous_database(self):
        self.upload(self.image)
        response = self.upload(b"garbage bytes\n" * 400, filename="broken.db")
        self.assertIn(b'Error loading database', response.data)
        self.assertIn(b'<option value="users"', response.data)
        self.assertEqual(self.session.current_tables(), ("users", "orders"))

    def test_select_table_prefills_query(self):
        self.upload(self.image)
        response = self.client.get('/tables/users')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'SELECT * FROM &#34;users&#34;', response.data)
        # Selecting a table does not run anything
        self.assertIsNone(self.session.last_result)

    def test_select_table_without_database(self):
        response = self.client.get('/tables/users', follow_redirects=True)
        self.assertIn(b'No database loaded', response.data)

    def test_query_renders_rows(self):
        self.upload(self.image)
        response = self.client.post('/query', data={'query': 'SELECT * FROM users ORDER BY id'})
        self.assertIn(b'id="query-result"', response.data)
        self.assertIn(b'<td>Alice</td>', response.data)
        self.assertIn(b'<td>Bob</td>', response.data)

    def test_query_empty_notice(self):
        self.upload(self.image)
        response = self.client.post('/query', data={'query': 'CREATE TABLE x (id INT)'})
        self.assertIn(b'id="query-notice"', response.data)
        self.assertIn(b'Query executed successfully but returned no results', response.data)
        self.assertNotIn(b'id="query-error"', response.data)

    def test_query_error_replaces_displayed_rows(self):
        self.upload(self.image)
        self.client.post('/query', data={'query': 'SELECT * FROM users'})
        response = self.client.post('/query', data={'query': 'SELECT * FROM nonexistent'})
        self.assertIn(b'id="query-error"', response.data)
        self.assertIn(b'Error executing query: no such table: nonexistent', response.data)
        self.assertNotIn(b'id="query-result"', response.data)
        # The rows are still held by the session
        self.assertEqual(self.session.last_result.row_count, 2)

    def test_query_without_database(self):
        response = self.client.post('/query', data={'query': 'SELECT 1'})
        self.assertIn(b'No database loaded', response.data)

    def test_save_downloads_current_database(self):
        self.upload(self.image)
        self.client.post('/query', data={'query': "INSERT INTO users VALUES (3, 'Carol')"})
        response = self.client.get('/save')
        self.assertEqual(response.status_code, 200)
        self.assertIn('attachment', response.headers['Content-Disposition'])
        self.assertIn('database.sqlite', response.headers['Content-Disposition'])

        reloaded = Session()
        try:
            reloaded.load_from_bytes(response.data)
            outcome = reloaded.execute("SELECT COUNT(*) FROM users")
            self.assertEqual(outcome.values[0][0].value, 3)
        finally:
            reloaded.close()

    def test_save_without_database(self):
        response = self.client.get('/save', follow_redirects=True)
        self.assertIn(b'No database loaded', response.data)

    def test_download_name_is_configurable(self):
        app = create_app({'TESTING': True, 'DOWNLOAD_NAME': 'edited.db'}, session=self.session)
        self.session.load_from_bytes(self.image)
        response = app.test_client().get('/save')
        self.assertIn('edited.db', response.headers['Content-Disposition'])


class TestApi(WebTestCase):
    """Test the JSON endpoints"""

    def test_tables(self):
        self.assertEqual(self.client.get('/api/tables').get_json(),
                         {'loaded': False, 'tables': []})
        self.upload(self.image)
        self.assertEqual(self.client.get('/api/tables').get_json(),
                         {'loaded': True, 'tables': ['users', 'orders']})

    def test_query_outcomes_are_distinct(self):
        self.upload(self.image)

        rows = self.client.post('/api/query', json={'sql': 'SELECT id, name FROM users ORDER BY id'})
        self.assertEqual(rows.get_json(), {
            'kind': 'rows',
            'columns': ['id', 'name'],
            'values': [['1', 'Alice'], ['2', 'Bob']],
        })

        empty = self.client.post('/api/query', json={'sql': 'DELETE FROM orders'})
        self.assertEqual(empty.get_json()['kind'], 'empty')

        error = self.client.post('/api/query', json={'sql': 'SELECT * FROM nonexistent'})
        self.assertEqual(error.status_code, 400)
        self.assertEqual(error.get_json(), {'kind': 'error', 'message': 'no such table: nonexistent'})

    def test_blank_query(self):
        self.upload(self.image)
        response = self.client.post('/api/query', json={'sql': '   '})
        self.assertEqual(response.get_json(), {'kind': 'none'})

    def test_query_without_database(self):
        response = self.client.post('/api/query', json={'sql': 'SELECT 1'})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()['kind'], 'error')

    def test_sql_must_be_a_string(self):
        response = self.client.post('/api/query', json={'sql': 5})
        self.assertEqual(response.status_code, 400)

    def test_body_must_be_an_object(self):
        self.upload(self.image)
        response = self.client.post('/api/query', json=["SELECT 1"])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['kind'], 'error')
        self.assertIsNone(self.session.last_result)


if __name__ == '__main__':
    unittest.main(verbosity=2)
