import unittest

from game import Settings, load_settings


class TestSettings(unittest.TestCase):
    def test_given_empty_env_when_loading_then_defaults(self):
        s = load_settings({})
        self.assertEqual((s.rows, s.cols), (10, 10))
        self.assertEqual(s.max_boxes, 100)
        self.assertEqual(s.history_capacity, 1000)
        self.assertEqual(s.log_level, 'WARNING')

    def test_given_env_values_when_loading_then_applied(self):
        s = load_settings({
            'SOKOBAN_ROWS': '6',
            'SOKOBAN_COLS': '8',
            'SOKOBAN_MAX_BOXES': '5',
            'SOKOBAN_HISTORY': '50',
            'SOKOBAN_LOG_LEVEL': 'debug',
        })
        self.assertEqual((s.rows, s.cols, s.max_boxes, s.history_capacity), (6, 8, 5, 50))
        self.assertEqual(s.log_level, 'DEBUG')

    def test_given_bad_env_values_when_loading_then_value_error_names_variable(self):
        with self.assertRaises(ValueError) as cm:
            load_settings({'SOKOBAN_ROWS': 'ten'})
        self.assertIn('SOKOBAN_ROWS', str(cm.exception))
        with self.assertRaises(ValueError):
            load_settings({'SOKOBAN_COLS': '0'})
        with self.assertRaises(ValueError):
            load_settings({'SOKOBAN_ROWS': '1000'})
        with self.assertRaises(ValueError):
            load_settings({'SOKOBAN_LOG_LEVEL': 'chatty'})

    def test_given_overrides_when_applied_then_only_non_none_change(self):
        s = Settings().with_overrides(rows=4, cols=None, history_capacity=9)
        self.assertEqual((s.rows, s.cols, s.history_capacity), (4, 10, 9))


if __name__ == '__main__':
    unittest.main(verbosity=2)
