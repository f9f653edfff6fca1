import unittest

from game import Board, BoxRegistry, History, HistoryFullError


class TestHistory(unittest.TestCase):
    def _mk_states(self, n):
        board = Board(width=4, height=1)
        reg = BoxRegistry(board)
        return [reg.snapshot((0, i % 4), move_counter=i) for i in range(n)]

    def test_given_commits_when_undoing_then_previous_snapshots_in_order(self):
        s0, s1, s2 = self._mk_states(3)
        h = History(s0)
        h.commit(s1)
        h.commit(s2)
        self.assertEqual(h.move_counter, 2)
        self.assertEqual(h.undo(), s1)
        self.assertEqual(h.undo(), s0)
        self.assertEqual(h.move_counter, 0)

    def test_given_initial_state_when_undoing_then_noop(self):
        (s0,) = self._mk_states(1)
        h = History(s0)
        self.assertIsNone(h.undo())
        self.assertEqual(h.move_counter, 0)
        self.assertEqual(h.current, s0)

    def test_given_moves_when_resetting_twice_then_same_as_once(self):
        s0, s1, s2 = self._mk_states(3)
        h = History(s0)
        h.commit(s1)
        h.commit(s2)
        first = h.reset()
        second = h.reset()
        self.assertEqual(first, s0)
        self.assertEqual(second, s0)
        self.assertEqual(h.move_counter, 0)
        self.assertEqual(h.initial, s0)

    def test_given_undo_when_committing_then_undone_tail_discarded(self):
        s0, s1, s2, s3 = self._mk_states(4)
        h = History(s0)
        h.commit(s1)
        h.commit(s2)
        h.undo()
        stamped = h.commit(s3)
        self.assertEqual(stamped.move_counter, 2)
        self.assertEqual(h.current, stamped)
        self.assertEqual(h.undo(), s1)

    def test_given_full_history_when_committing_then_rejected_without_change(self):
        s0, s1, s2 = self._mk_states(3)
        h = History(s0, capacity=2)
        h.commit(s1)
        with self.assertRaises(HistoryFullError) as cm:
            h.commit(s2)
        self.assertEqual(cm.exception.capacity, 2)
        self.assertEqual(h.current, s1)
        self.assertEqual(len(h), 2)
        # Undo frees room again
        h.undo()
        h.commit(s2)
        self.assertEqual(h.current.player, s2.player)

    def test_given_bad_capacity_when_creating_then_value_error(self):
        (s0,) = self._mk_states(1)
        with self.assertRaises(ValueError):
            History(s0, capacity=0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
