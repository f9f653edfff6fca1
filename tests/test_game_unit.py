import unittest

from game import (
    Board,
    BoxRegistry,
    EMPTY,
    GameState,
    InvariantError,
    NO_BOX,
    OutOfBoundsError,
    SetupError,
    STORAGE,
    TooManyBoxesError,
    WALL,
)


class TestBoard(unittest.TestCase):
    def test_given_board_with_torus_when_accessing_cells_then_indices_and_wraparound_correct(self):
        board = Board.from_rows([
            '#  ',
            ' . ',
            '  .',
        ])
        self.assertEqual(board.index(1, 2), 5)
        self.assertEqual(board.at(-1, -1), STORAGE)  # wraps to (2,2)
        self.assertEqual(board.at(3, 3), WALL)       # wraps to (0,0)
        self.assertEqual(board.wrap(-1, 3), (2, 0))

    def test_given_edge_cell_when_stepping_then_wraps_to_opposite_edge(self):
        board = Board(width=4, height=3)
        self.assertEqual(board.step((1, 3), 'right'), (1, 0))
        self.assertEqual(board.step((1, 0), 'left'), (1, 3))
        self.assertEqual(board.step((0, 2), 'up'), (2, 2))
        self.assertEqual(board.step((2, 2), 'down'), (0, 2))

    def test_given_out_of_range_coords_when_reading_or_setting_terrain_then_reported(self):
        board = Board(width=3, height=3)
        with self.assertRaises(OutOfBoundsError):
            board.terrain_at(3, 0)
        with self.assertRaises(OutOfBoundsError):
            board.set_terrain(0, -1, WALL)
        self.assertTrue(all(t == EMPTY for t in board.grid))

    def test_given_locked_board_when_setting_terrain_then_setup_error(self):
        board = Board(width=2, height=2)
        board.set_terrain(0, 1, STORAGE)
        board.lock()
        with self.assertRaises(SetupError):
            board.set_terrain(0, 0, WALL)
        self.assertEqual(board.terrain_at(0, 1), STORAGE)

    def test_given_unknown_glyph_when_building_from_rows_then_value_error(self):
        with self.assertRaises(ValueError):
            Board.from_rows(['#x'])
        with self.assertRaises(ValueError):
            Board.from_rows(['##', '#'])

    def test_given_board_when_listing_storage_then_all_storage_cells(self):
        board = Board.from_rows(['. ', ' .'])
        self.assertEqual(board.storage_cells(), [(0, 0), (1, 1)])


class TestBoxRegistry(unittest.TestCase):
    def _mk_registry(self, width=5, height=5, max_boxes=100):
        return BoxRegistry(Board(width=width, height=height), max_boxes)

    def test_given_boxes_when_registering_then_ids_are_sequential_and_occupancy_matches(self):
        reg = self._mk_registry()
        a = reg.register_box((0, 0))
        b = reg.register_box((2, 3))
        self.assertEqual((a, b), (1, 2))
        self.assertEqual(reg.box_at((2, 3)), b)
        self.assertEqual(reg.box_at((1, 1)), NO_BOX)
        self.assertEqual(reg.position_of(a), (0, 0))
        self.assertEqual(reg.group_members(a), frozenset({a}))
        reg.check_invariants()

    def test_given_limit_reached_when_registering_then_too_many_boxes(self):
        reg = self._mk_registry(max_boxes=2)
        reg.register_box((0, 0))
        reg.register_box((0, 1))
        with self.assertRaises(TooManyBoxesError):
            reg.register_box((0, 2))
        self.assertEqual(len(reg), 2)

    def test_given_occupied_or_off_board_cell_when_registering_then_setup_error(self):
        reg = self._mk_registry()
        reg.register_box((1, 1))
        with self.assertRaises(SetupError):
            reg.register_box((1, 1))
        with self.assertRaises(OutOfBoundsError):
            reg.register_box((5, 0))

    def test_given_links_when_merging_groups_then_membership_is_unioned(self):
        reg = self._mk_registry()
        a, b, c, d = (reg.register_box((0, i)) for i in range(4))
        reg.link(a, b)
        reg.link(c, d)
        reg.link(b, c)
        # Every prior member of both groups survives the merge
        for box in (a, b, c, d):
            self.assertEqual(reg.group_members(box), frozenset({a, b, c, d}))

    def test_given_repeated_or_swapped_links_when_merging_then_idempotent_and_commutative(self):
        reg = self._mk_registry()
        a, b, c = (reg.register_box((1, i)) for i in range(3))
        root = reg.link(a, b)
        self.assertEqual(reg.link(b, a), root)
        self.assertEqual(reg.link(a, b), root)
        self.assertEqual(reg.group_members(a), frozenset({a, b}))
        self.assertEqual(reg.group_members(c), frozenset({c}))
        self.assertEqual(reg.link(a, a), reg.find(a))

    def test_given_arbitrary_links_when_querying_groups_then_equivalence_relation(self):
        reg = self._mk_registry(width=6, height=6)
        boxes = [reg.register_box((i // 6, i % 6)) for i in range(12)]
        for x, y in [(0, 3), (3, 7), (1, 2), (7, 11), (5, 6), (2, 1), (9, 9)]:
            reg.link(boxes[x], boxes[y])
        for p in boxes:
            gp = reg.group_members(p)
            self.assertIn(p, gp)  # reflexive
            for q in gp:
                gq = reg.group_members(q)
                self.assertIn(p, gq)  # symmetric
                self.assertEqual(gp, gq)  # transitive: same class
        self.assertEqual(reg.group_members(boxes[0]), frozenset(boxes[i] for i in (0, 3, 7, 11)))
        groups = reg.groups()
        self.assertEqual(sum(len(g) for g in groups), len(boxes))

    def test_given_linked_box_when_removed_then_rest_of_group_stays_linked(self):
        reg = self._mk_registry()
        a, b, c = (reg.register_box((2, i)) for i in range(3))
        reg.link(a, b)
        reg.link(b, c)
        reg.remove_box(reg.find(a))
        survivors = set(reg.box_ids())
        self.assertEqual(len(survivors), 2)
        for box in survivors:
            self.assertEqual(reg.group_members(box), frozenset(survivors))
        reg.check_invariants()

    def test_given_box_when_moving_onto_other_box_then_invariant_error_and_nothing_changes(self):
        reg = self._mk_registry()
        a = reg.register_box((0, 0))
        b = reg.register_box((0, 1))
        with self.assertRaises(InvariantError):
            reg.move_box_to(a, (0, 1))
        self.assertEqual(reg.position_of(a), (0, 0))
        self.assertEqual(reg.box_at((0, 0)), a)
        self.assertEqual(reg.box_at((0, 1)), b)
        reg.move_box_to(a, (4, 4))
        self.assertEqual(reg.box_at((0, 0)), NO_BOX)
        self.assertEqual(reg.box_at((4, 4)), a)
        reg.check_invariants()

    def test_given_registry_copy_when_mutated_then_original_untouched(self):
        reg = self._mk_registry()
        a = reg.register_box((0, 0))
        b = reg.register_box((3, 3))
        other = reg.copy()
        other.link(a, b)
        other.move_box_to(a, (1, 0))
        self.assertEqual(reg.group_members(a), frozenset({a}))
        self.assertEqual(reg.position_of(a), (0, 0))
        self.assertEqual(other.group_members(a), frozenset({a, b}))

    def test_given_corrupt_occupancy_when_checking_then_invariant_error(self):
        reg = self._mk_registry()
        reg.register_box((2, 2))
        reg.vacate((2, 2))
        with self.assertRaises(InvariantError):
            reg.check_invariants()

    def test_given_snapshot_when_loading_then_positions_restored(self):
        reg = self._mk_registry()
        a = reg.register_box((0, 0))
        snap = reg.snapshot(player=(4, 4), move_counter=3)
        self.assertEqual(snap.boxes, ((a, (0, 0)),))
        self.assertEqual(snap.move_counter, 3)
        reg.move_box_to(a, (2, 2))
        reg.load(snap)
        self.assertEqual(reg.position_of(a), (0, 0))
        self.assertEqual(reg.box_at((2, 2)), NO_BOX)
        reg.check_invariants()


class TestGameState(unittest.TestCase):
    def test_given_gamestate_when_calling_helpers_then_expected_values(self):
        board = Board.from_rows(['. ', '  '])
        reg = BoxRegistry(board)
        a = reg.register_box((0, 0))
        b = reg.register_box((1, 1))
        s = reg.snapshot((0, 1))
        self.assertEqual(s.box_at((1, 1)), b)
        self.assertEqual(s.position_of(a), (0, 0))
        self.assertEqual(s.box_positions(), {a: (0, 0), b: (1, 1)})
        self.assertEqual(s.boxes_off_storage(), [b])
        with self.assertRaises(KeyError):
            s.position_of(99)
        s2 = s.with_counter(4)
        self.assertEqual(s2.move_counter, 4)
        self.assertNotEqual(s, s2)
        self.assertEqual(s, s2.with_counter(0))

    def test_given_equal_snapshots_when_hashing_then_same_hash(self):
        board = Board(width=2, height=2)
        s1 = GameState(board=board, occupancy=(0, 1, 0, 0), boxes=((1, (0, 1)),), player=(1, 1))
        s2 = GameState(board=board, occupancy=(0, 1, 0, 0), boxes=((1, (0, 1)),), player=(1, 1))
        self.assertEqual(s1, s2)
        self.assertEqual(hash(s1), hash(s2))


if __name__ == '__main__':
    unittest.main(verbosity=2)
