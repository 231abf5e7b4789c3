import unittest
from datetime import date

from core.calendar_grid import get_year_weeks
from core.grid_renderer import DAY_LABELS, classify_cell, render_board, render_goal
from models.enums import CellFlag, DayStatus
from models.goal import Goal, StatusStore

TODAY = date(2026, 10, 19)


class TestClassifyCell(unittest.TestCase):
    def test_other_year_iff_outside_requested_year(self) -> None:
        days = StatusStore()
        for year in (2026, 2027):
            for week in get_year_weeks(year):
                for day in week:
                    cell = classify_cell(day, days, year, TODAY)
                    self.assertEqual(CellFlag.OTHER_YEAR in cell.flags, day.year != year)

    def test_flags_combine(self) -> None:
        days = StatusStore({"2026-10-19": "completed", "2025-12-29": "missed"})

        today = classify_cell(date(2026, 10, 19), days, 2026, TODAY)
        self.assertEqual(today.flags, (CellFlag.COMPLETED, CellFlag.TODAY))
        self.assertEqual(today.css_classes, "cell completed today")

        padding = classify_cell(date(2025, 12, 29), days, 2026, TODAY)
        self.assertEqual(padding.flags, (CellFlag.MISSED, CellFlag.OTHER_YEAR))
        self.assertEqual(padding.status, DayStatus.MISSED)

    def test_future_cells_are_never_interactive(self) -> None:
        days = StatusStore({"2026-10-25": "completed"})
        cell = classify_cell(date(2026, 10, 25), days, 2026, TODAY)
        self.assertIn(CellFlag.FUTURE, cell.flags)
        self.assertFalse(cell.interactive)
        self.assertTrue(classify_cell(TODAY, days, 2026, TODAY).interactive)

    def test_tooltip(self) -> None:
        days = StatusStore({"2026-10-19": "completed", "2026-10-18": "missed"})
        self.assertEqual(classify_cell(date(2026, 10, 19), days, 2026, TODAY).tooltip,
                         "Mon, Oct 19, 2026 - Completed")
        self.assertEqual(classify_cell(date(2026, 10, 18), days, 2026, TODAY).tooltip,
                         "Sun, Oct 18, 2026 - Missed")
        self.assertEqual(classify_cell(date(2026, 1, 5), days, 2026, TODAY).tooltip,
                         "Mon, Jan 5, 2026")


class TestRenderGoal(unittest.TestCase):
    def setUp(self) -> None:
        self.goal = Goal(name="Run", user_id="u1")
        self.goal.days.toggle("2026-10-19")

    def test_matrix_stats_and_labels(self) -> None:
        rendered = render_goal(self.goal, 2026, TODAY)

        self.assertEqual(rendered.goal_id, self.goal.client_id)
        self.assertEqual(len(rendered.weeks), 53)
        self.assertEqual(rendered.stats.completed, 1)
        self.assertEqual(rendered.stats.streak, 1)
        self.assertEqual(len(rendered.month_segments), 12)

    def test_rows_are_weekdays(self) -> None:
        rows = render_goal(self.goal, 2026, TODAY).rows

        self.assertEqual([label for label, _ in rows], DAY_LABELS)
        sundays = rows[0][1]
        self.assertEqual(len(sundays), 53)
        self.assertTrue(all(cell.date.weekday() == 6 for cell in sundays))
        mondays = rows[1][1]
        self.assertIn("2026-10-19", [cell.key for cell in mondays])

    def test_rendering_is_repeatable(self) -> None:
        first = render_goal(self.goal, 2026, TODAY).to_dict()
        second = render_goal(self.goal, 2026, TODAY).to_dict()
        self.assertEqual(first, second)
        self.assertEqual(len(self.goal.days), 1)

    def test_status_survives_year_switch(self) -> None:
        self.goal.days.toggle("2027-01-01")
        rendered = render_goal(self.goal, 2026, TODAY)
        last_week = rendered.weeks[-1]
        padded = [cell for cell in last_week if cell.key == "2027-01-01"][0]
        self.assertEqual(padded.status, DayStatus.COMPLETED)
        self.assertIn(CellFlag.OTHER_YEAR, padded.flags)


class TestRenderBoard(unittest.TestCase):
    def test_board(self) -> None:
        goals = [Goal(name="Run"), Goal(name="Read")]
        board = render_board(goals, 2026, TODAY, 2026,
                             sync_errors={goals[1].client_id: "timeout"})

        self.assertFalse(board.is_empty)
        self.assertEqual(board.years, [2026, 2027])
        self.assertEqual([goal.name for goal in board.goals], ["Run", "Read"])
        self.assertIsNone(board.goals[0].sync_error)
        self.assertEqual(board.goals[1].sync_error, "timeout")

        data = board.to_dict()
        self.assertEqual(data["year"], 2026)
        self.assertEqual(data["goals"][0]["month_labels"][0]["name"], "Jan")

    def test_empty_board(self) -> None:
        self.assertTrue(render_board([], 2026, TODAY, 2026).is_empty)


if __name__ == "__main__":
    unittest.main(verbosity=2)
