"""
Tests for the interaction controller and its command surface.
"""

import unittest

from sketchpad.config import SketchpadConfig
from sketchpad.controller import BuildingPolygon, Drawing, Idle, Mode, Moving, Session
from sketchpad.shapes import Circle, Group, Line, Polygon, Rectangle, Square, render
from sketchpad.surface import RecordingSurface


def drag(session, start, end, via=()):
    session.pointer_down(*start)
    for point in via:
        session.pointer_move(*point)
    session.pointer_move(*end)
    session.pointer_up(*end)


def click(session, point, release=None):
    session.pointer_down(*point)
    session.pointer_up(*(release or point))


class SessionTestCase(unittest.TestCase):
    def setUp(self):
        self.surface = RecordingSurface()
        self.session = Session(self.surface)

    def draw_rect(self, start, end):
        self.session.set_mode("rectangle")
        drag(self.session, start, end)
        return self.session.objects[-1]


class TestDrawing(SessionTestCase):
    def test_end_to_end_undo_redo(self):
        self.session.set_mode(Mode.RECTANGLE)
        drag(self.session, (0, 0), (50, 30))
        self.session.set_mode(Mode.CIRCLE)
        drag(self.session, (100, 100), (120, 120), via=[(110, 110)])
        rect = Rectangle(0, 0, 50, 30, "#000000", 1)
        circle = Circle(100, 100, 20, 20, "#000000", 1)
        self.assertEqual(self.session.objects, [rect, circle])

        self.assertTrue(self.session.undo())
        self.assertEqual(self.session.objects, [rect])
        self.assertTrue(self.session.redo())
        self.assertEqual(self.session.objects, [rect, circle])

    def test_shapes_capture_tool_settings_at_creation(self):
        self.session.set_color("#ff0000")
        self.session.set_line_width(4)
        rect = self.draw_rect((0, 0), (10, 10))
        self.session.set_color("#00ff00")
        self.session.set_line_width(1)
        self.assertEqual((rect.color, rect.line_width), ("#ff0000", 4))

    def test_preview_restores_before_each_frame(self):
        self.session.set_mode("rectangle")
        self.session.pointer_down(0, 0)
        self.session.pointer_move(10, 10)
        self.session.pointer_move(30, 20)
        self.assertIsInstance(self.session.state, Drawing)
        self.assertEqual(self.surface.strokes(), [("rect", (0, 0, 30, 20))])
        self.assertEqual(self.session.objects, [])
        self.assertEqual(self.session.history.undo_depth, 0)

    def test_preview_keeps_existing_pixels(self):
        self.draw_rect((0, 0), (5, 5))
        self.session.set_mode("line")
        self.session.pointer_down(0, 0)
        self.session.pointer_move(8, 9)
        self.assertEqual(
            self.surface.strokes(),
            [("rect", (0, 0, 5, 5)), ("line", (0, 0, 8, 9))],
        )

    def test_square_and_circle_previews_match_committed_shape(self):
        self.session.set_mode("square")
        self.session.pointer_down(10, 10)
        self.session.pointer_move(0, 40)
        self.assertEqual(self.surface.strokes()[-1], ("rect", (10, 10, 30, 30)))
        self.session.pointer_up(0, 40)
        self.assertEqual(self.session.objects, [Square(10, 10, 30, 30, "#000000", 1)])

    def test_every_primitive_mode_commits_once(self):
        for mode in ("line", "rectangle", "ellipse", "square", "circle"):
            self.session.set_mode(mode)
            drag(self.session, (0, 0), (20, 10))
        self.assertEqual([s.kind for s in self.session.objects], ["line", "rectangle", "ellipse", "square", "circle"])
        self.assertEqual(self.session.history.undo_depth, 5)
        self.assertIsInstance(self.session.state, Idle)

    def test_freehand_strokes_accumulate_without_shapes(self):
        self.session.set_mode("freehand")
        self.session.pointer_down(0, 0)
        self.session.pointer_move(5, 5)
        self.session.pointer_move(10, 5)
        self.session.pointer_up(10, 5)
        self.assertEqual(
            self.surface.strokes(),
            [("line", (0, 0, 0, 0)), ("line", (0, 0, 5, 5)), ("line", (5, 5, 10, 5))],
        )
        self.assertEqual(self.session.objects, [])
        self.assertEqual(self.session.history.undo_depth, 1)

    def test_freehand_marks_vanish_on_redraw(self):
        self.session.set_mode("freehand")
        drag(self.session, (0, 0), (5, 5))
        self.draw_rect((10, 10), (20, 20))
        self.session.redraw()
        self.assertEqual(self.surface.strokes(), [("rect", (10, 10, 10, 10))])

    def test_pointer_move_without_gesture_is_ignored(self):
        self.session.set_mode("rectangle")
        self.session.pointer_move(5, 5)
        self.session.pointer_up(5, 5)
        self.assertEqual(self.surface.commands, [])
        self.assertEqual(self.session.objects, [])

    def test_snapshot_is_taken_fresh_for_each_gesture(self):
        self.draw_rect((0, 0), (5, 5))
        self.draw_rect((10, 10), (20, 20))
        self.assertEqual(
            self.surface.strokes(),
            [("rect", (0, 0, 5, 5)), ("rect", (10, 10, 10, 10))],
        )


class TestPolygon(SessionTestCase):
    def setUp(self):
        super().setUp()
        self.session.set_mode("polygon")

    def test_closing_appends_first_point(self):
        for point in ((0, 0), (10, 0), (10, 10)):
            click(self.session, point)
        polygon = self.session.finalize_polygon()
        self.assertEqual(polygon.points, [(0, 0), (10, 0), (10, 10), (0, 0)])
        self.assertEqual(self.session.objects, [polygon])
        self.assertEqual(self.session.points, [])
        self.assertIsInstance(self.session.state, Idle)
        self.assertEqual(self.surface.strokes()[-1], ("polyline", ((0, 0), (10, 0), (10, 10), (0, 0))))

    def test_anchor_not_release_point_is_buffered(self):
        click(self.session, (0, 0), release=(30, 30))
        self.assertEqual(self.session.points, [(0, 0)])
        self.assertEqual(self.session.state, BuildingPolygon(((0, 0),)))

    def test_vertex_clicks_do_not_commit(self):
        click(self.session, (0, 0))
        click(self.session, (10, 0))
        self.assertEqual(self.session.history.undo_depth, 0)
        self.session.finalize_polygon()
        self.assertEqual(self.session.history.undo_depth, 1)
        self.session.undo()
        self.assertEqual(self.session.objects, [])

    def test_two_points_are_enough(self):
        click(self.session, (0, 0))
        click(self.session, (10, 0))
        polygon = self.session.finalize_polygon()
        self.assertEqual(polygon.points, [(0, 0), (10, 0), (0, 0)])

    def test_finalize_with_one_point_keeps_buffer(self):
        click(self.session, (0, 0))
        self.assertIsNone(self.session.finalize_polygon())
        self.assertEqual(self.session.points, [(0, 0)])
        self.assertEqual(self.session.objects, [])
        self.assertEqual(self.session.history.undo_depth, 0)

    def test_finalize_outside_polygon_mode_is_no_op(self):
        click(self.session, (0, 0))
        click(self.session, (10, 0))
        self.session.set_mode("line")
        self.assertEqual(self.session.points, [])
        self.assertIsNone(self.session.finalize_polygon())

    def test_reselecting_polygon_mode_keeps_points(self):
        click(self.session, (0, 0))
        self.session.set_mode("polygon")
        self.assertEqual(self.session.points, [(0, 0)])
        self.assertIsInstance(self.session.state, BuildingPolygon)

    def test_preview_draws_through_buffered_points(self):
        click(self.session, (0, 0))
        self.session.pointer_down(10, 0)
        self.session.pointer_move(10, 10)
        self.assertEqual(self.surface.strokes()[-1], ("polyline", ((0, 0), (10, 10))))

    def test_polygon_color_comes_from_tool(self):
        self.session.set_color("#336699")
        click(self.session, (0, 0))
        click(self.session, (10, 0))
        click(self.session, (10, 10))
        polygon = self.session.finalize_polygon()
        self.assertEqual((polygon.color, polygon.line_width), ("#336699", 1))


class TestMove(SessionTestCase):
    def test_move_rectangle_and_undo(self):
        self.draw_rect((10, 10), (60, 40))
        self.session.set_mode("move")
        self.session.pointer_down(20, 20)
        self.assertIsInstance(self.session.state, Moving)
        self.session.pointer_move(25, 22)
        self.session.pointer_move(30, 25)
        self.session.pointer_up(30, 25)
        self.assertEqual(self.session.objects, [Rectangle(20, 15, 50, 30, "#000000", 1)])
        self.assertIs(self.session.selected_object, self.session.objects[0])
        self.assertIsInstance(self.session.state, Idle)

        self.session.undo()
        self.assertEqual(self.session.objects, [Rectangle(10, 10, 50, 30, "#000000", 1)])

    def test_move_line_by_first_endpoint(self):
        self.session.objects.append(Line(0, 0, 100, 0, "#000000", 1))
        self.session.set_line_width(3)
        self.session.set_mode("move")
        self.session.pointer_down(50, 1)
        self.session.pointer_move(60, 11)
        self.session.pointer_up(60, 11)
        self.assertEqual(self.session.objects, [Line(10, 10, 110, 10, "#000000", 1)])

    def test_move_polygon_by_first_vertex(self):
        polygon = Polygon([(0, 0), (10, 0), (10, 10), (0, 0)], "#000000", 1)
        self.session.objects.append(polygon)
        self.session.set_mode("move")
        self.session.pointer_down(8, 2)
        self.session.pointer_move(18, 7)
        self.session.pointer_up(18, 7)
        self.assertEqual(self.session.objects[0].points, [(10, 5), (20, 5), (20, 15), (10, 5)])

    def test_moved_shape_is_drawn_on_top(self):
        self.draw_rect((0, 0), (20, 20))
        self.draw_rect((50, 50), (60, 60))
        self.session.set_mode("move")
        self.session.pointer_down(5, 5)
        self.session.pointer_move(6, 6)
        self.assertEqual(
            self.surface.strokes(),
            [("rect", (1, 1, 20, 20)), ("rect", (50, 50, 10, 10)), ("rect", (1, 1, 20, 20))],
        )

    def test_bottom_most_shape_is_picked(self):
        bottom = self.draw_rect((0, 0), (100, 100))
        self.draw_rect((10, 10), (30, 30))
        self.session.set_mode("move")
        self.session.pointer_down(15, 15)
        self.assertIs(self.session.selected_object, bottom)

    def test_miss_does_nothing(self):
        self.draw_rect((0, 0), (10, 10))
        depth = self.session.history.undo_depth
        self.session.set_mode("move")
        self.session.pointer_down(50, 50)
        self.session.pointer_move(60, 60)
        self.session.pointer_up(60, 60)
        self.assertIsNone(self.session.selected_object)
        self.assertEqual(self.session.history.undo_depth, depth)
        self.assertEqual(self.session.objects, [Rectangle(0, 0, 10, 10, "#000000", 1)])

    def test_line_pick_uses_current_tool_width(self):
        self.session.objects.append(Line(0, 0, 100, 0, "#000000", 10))
        self.assertIsNone(self.session.shape_at(50, 2))
        self.session.set_line_width(3)
        self.assertIsNotNone(self.session.shape_at(50, 2))

    def test_mode_switch_clears_selection(self):
        rect = self.draw_rect((0, 0), (10, 10))
        self.session.select(rect)
        self.session.select_many([rect])
        self.session.set_mode("line")
        self.assertIsNone(self.session.selected_object)
        self.assertEqual(self.session.selected_objects, [])


class TestClipboard(SessionTestCase):
    def test_cut_then_paste(self):
        self.session.set_color("#ff0000")
        self.session.set_line_width(2)
        original = self.draw_rect((5, 5), (25, 15))
        self.session.set_mode("move")
        click(self.session, (10, 10))
        self.assertIs(self.session.cut(), original)
        self.assertEqual(self.session.objects, [])
        self.assertIsNone(self.session.selected_object)

        pasted = self.session.paste()
        self.assertEqual(pasted, Rectangle(15, 15, 20, 10, "#ff0000", 2))
        self.assertIsNot(pasted, original)
        self.assertEqual(self.session.objects, [pasted])

    def test_repeated_paste_uses_fixed_offset(self):
        rect = self.draw_rect((5, 5), (25, 15))
        self.session.select(rect)
        self.session.cut()
        first = self.session.paste()
        second = self.session.paste()
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertEqual((second.x, second.y), (15, 15))

    def test_paste_offsets_lines_and_polygons(self):
        line = Line(0, 0, 10, 10, "#000000", 1)
        self.session.objects.append(line)
        self.session.select(line)
        self.session.cut()
        self.assertEqual(self.session.paste(), Line(10, 10, 20, 20, "#000000", 1))

    def test_paste_offset_from_config(self):
        session = Session(RecordingSurface(), SketchpadConfig(paste_offset=(20.0, 0.0)))
        rect = Rectangle(0, 0, 5, 5, "#000000", 1)
        session.objects.append(rect)
        session.select(rect)
        session.cut()
        self.assertEqual(session.paste(), Rectangle(20, 0, 5, 5, "#000000", 1))

    def test_cut_and_paste_commit_history(self):
        rect = self.draw_rect((0, 0), (10, 10))
        self.session.select(rect)
        self.session.cut()
        self.session.paste()
        self.session.undo()
        self.assertEqual(self.session.objects, [])
        self.session.undo()
        self.assertEqual(self.session.objects, [Rectangle(0, 0, 10, 10, "#000000", 1)])

    def test_preconditions_are_no_ops(self):
        self.assertIsNone(self.session.cut())
        self.assertIsNone(self.session.paste())
        self.assertEqual(self.session.history.undo_depth, 0)


class TestGrouping(SessionTestCase):
    def setUp(self):
        super().setUp()
        self.a = self.draw_rect((10, 20), (30, 40))
        self.session.set_mode("line")
        drag(self.session, (5, 50), (40, 60))
        self.b = self.session.objects[-1]
        self.c = self.draw_rect((100, 100), (120, 120))

    def test_grouping_drops_stale_single_selection(self):
        self.session.set_mode("move")
        click(self.session, (15, 25))
        self.assertIs(self.session.selected_object, self.a)
        self.session.select_many([self.a, self.b])
        self.session.group()
        self.assertIsNone(self.session.selected_object)
        depth = self.session.history.undo_depth
        self.assertIsNone(self.session.cut())
        self.assertIsNone(self.session.copied)
        self.assertEqual(self.session.history.undo_depth, depth)

    def test_cut_ignores_selection_no_longer_on_canvas(self):
        self.session.select(self.a)
        self.session.objects = [self.b, self.c]
        self.assertIsNone(self.session.cut())
        self.assertEqual(self.session.objects, [self.b, self.c])

    def test_group_at_uses_group_bounds(self):
        group = self.session.group([self.a, self.b])
        self.assertIs(self.session.group_at(20, 55), group)
        self.assertIs(self.session.group_at(5, 20), group)
        self.assertIsNone(self.session.group_at(110, 110))
        self.assertIsNone(self.session.group_at(50, 30))
        self.session.select(self.session.group_at(20, 55))
        self.assertEqual(self.session.ungroup(), [self.a, self.b])

    def test_group_replaces_members(self):
        group = self.session.group([self.a, self.b])
        self.assertIsInstance(group, Group)
        self.assertEqual(len(self.session.objects), 2)
        self.assertIs(self.session.objects[0], self.c)
        self.assertIs(self.session.objects[1], group)
        self.assertEqual(group.objects, [self.a, self.b])
        self.assertEqual((group.x, group.y), (5, 20))

    def test_group_uses_multi_selection(self):
        self.session.select_many([self.a, self.c])
        group = self.session.group()
        self.assertEqual(group.objects, [self.a, self.c])
        self.assertEqual(self.session.selected_objects, [])

    def test_group_needs_two_shapes(self):
        depth = self.session.history.undo_depth
        self.assertIsNone(self.session.group([self.a]))
        self.assertIsNone(self.session.group([]))
        self.assertEqual(self.session.history.undo_depth, depth)
        self.assertEqual(len(self.session.objects), 3)

    def test_group_ignores_shapes_not_on_canvas(self):
        stranger = Rectangle(0, 0, 1, 1, "#000000", 1)
        self.assertIsNone(self.session.group([self.a, stranger]))

    def test_group_then_ungroup_preserves_content(self):
        a, b = self.a, self.b
        group = self.session.group([a, b])
        self.session.select(group)
        members = self.session.ungroup()
        self.assertEqual(members, [a, b])
        self.assertIn(a, self.session.objects)
        self.assertIn(b, self.session.objects)
        self.assertNotIn(group, self.session.objects)
        self.assertIsNone(self.session.selected_object)

    def test_group_is_not_hit_by_pointer(self):
        self.session.group([self.a, self.b])
        self.session.set_mode("move")
        self.session.pointer_down(15, 25)
        self.assertIsNone(self.session.selected_object)

    def test_group_renders_members(self):
        self.session.group([self.a, self.b])
        self.assertEqual(
            self.surface.strokes(),
            [("rect", (100, 100, 20, 20)), ("rect", (10, 20, 20, 20)), ("line", (5, 50, 40, 60))],
        )

    def test_ungroup_without_group_is_no_op(self):
        self.session.select(self.a)
        self.assertIsNone(self.session.ungroup())
        self.session.select(None)
        self.assertIsNone(self.session.ungroup())

    def test_group_and_ungroup_are_undoable(self):
        before = list(self.session.objects)
        group = self.session.group([self.a, self.b])
        self.session.select(group)
        self.session.ungroup()
        self.session.undo()
        self.assertEqual(len(self.session.objects), 2)
        self.assertIsInstance(self.session.objects[1], Group)
        self.session.undo()
        self.assertEqual(self.session.objects, before)


class TestClearUndoRedo(SessionTestCase):
    def test_clear_empties_canvas_and_is_undoable(self):
        rect = self.draw_rect((0, 0), (10, 10))
        self.session.select(rect)
        self.session.clear()
        self.assertEqual(self.session.objects, [])
        self.assertEqual(self.surface.commands, [])
        self.assertIsNone(self.session.selected_object)
        self.session.undo()
        self.assertEqual(self.session.objects, [Rectangle(0, 0, 10, 10, "#000000", 1)])
        self.assertEqual(self.surface.strokes(), [("rect", (0, 0, 10, 10))])

    def test_undo_redo_on_empty_history(self):
        objects = self.session.objects
        self.assertFalse(self.session.undo())
        self.assertFalse(self.session.redo())
        self.assertIs(self.session.objects, objects)

    def test_new_action_after_undo_discards_redo(self):
        self.draw_rect((0, 0), (10, 10))
        self.draw_rect((20, 20), (30, 30))
        self.session.undo()
        self.draw_rect((40, 40), (50, 50))
        self.assertFalse(self.session.redo())
        self.assertEqual(
            self.session.objects,
            [Rectangle(0, 0, 10, 10, "#000000", 1), Rectangle(40, 40, 10, 10, "#000000", 1)],
        )

    def test_undo_clears_stale_selection(self):
        rect = self.draw_rect((0, 0), (10, 10))
        self.session.select(rect)
        self.session.select_many([rect])
        self.session.undo()
        self.assertIsNone(self.session.selected_object)
        self.assertEqual(self.session.selected_objects, [])

    def test_redraw_matches_model(self):
        self.draw_rect((0, 0), (10, 10))
        self.session.set_mode("circle")
        drag(self.session, (50, 50), (60, 70))
        self.session.undo()
        self.session.redo()
        expected = RecordingSurface()
        for shape in self.session.objects:
            render(shape, expected)
        self.assertEqual(self.surface.commands, expected.commands)


class TestToolState(SessionTestCase):
    def test_unknown_mode_raises(self):
        with self.assertRaises(ValueError):
            self.session.set_mode("spray")

    def test_line_width_must_be_positive(self):
        with self.assertRaises(ValueError):
            self.session.set_line_width(0)

    def test_defaults_from_config(self):
        session = Session(RecordingSurface(), SketchpadConfig(default_color="#ff00ff", default_line_width=5))
        self.assertEqual(session.mode, Mode.FREEHAND)
        self.assertEqual((session.tool.color, session.tool.line_width), ("#ff00ff", 5))

    def test_select_rejects_foreign_shapes(self):
        self.session.select(Rectangle(0, 0, 1, 1, "#000000", 1))
        self.assertIsNone(self.session.selected_object)


if __name__ == "__main__":
    unittest.main()
