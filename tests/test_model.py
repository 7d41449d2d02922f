"""
Unit tests for the simulation model.

These tests verify:
1. The scalar derivations (phase, tile, reduction index, thread label)
2. Cell progress rules and their monotonicity over the timeline
3. The shared memory tile view
4. The reference scenarios, including the phase/tile offset at step 50
"""

import numpy as np
import pytest

from pytiling.config import MATRIX_SIZE, TOTAL_STEPS
from pytiling.core.model import (
    OutputTile,
    Phase,
    ThreadIndex,
    cell_progress_at,
    compute_state,
    output_tile_at,
    phase_at,
    progress_block,
    reduction_index_at,
    sweep_block,
    thread_index_at,
    tile_count,
)

ALL_STEPS = range(TOTAL_STEPS + 1)
ALL_CELLS = [(r, c) for r in range(MATRIX_SIZE) for c in range(MATRIX_SIZE)]


class TestScalarDerivations:
    """Test suite for the per-field step mappings."""

    def test_phase_is_load_before_midpoint(self):
        for step in ALL_STEPS:
            expected = Phase.LOAD if step < 50 else Phase.COMPUTE
            assert phase_at(step) is expected

    def test_phase_never_reverts(self):
        phases = [phase_at(step) for step in ALL_STEPS]
        first_compute = phases.index(Phase.COMPUTE)
        assert all(p is Phase.COMPUTE for p in phases[first_compute:])

    def test_phase_midpoint_follows_total_steps(self):
        assert phase_at(19, total_steps=40) is Phase.LOAD
        assert phase_at(20, total_steps=40) is Phase.COMPUTE

    def test_output_tile_is_diagonal(self):
        for step in range(TOTAL_STEPS):
            tile = output_tile_at(step)
            assert tile.row == tile.col == step // 25

    def test_output_tile_is_bounded(self):
        for step in ALL_STEPS:
            tile = output_tile_at(step)
            assert 0 <= tile.row <= 3
        assert output_tile_at(100) == OutputTile(3, 3)

    def test_sweep_block_is_not_clamped(self):
        assert sweep_block(99) == 3
        assert sweep_block(100) == 4

    def test_tile_count(self):
        assert tile_count(100) == 4
        assert tile_count(50) == 2
        assert tile_count(60) == 3
        assert tile_count(1000) == MATRIX_SIZE
        assert tile_count(0) == 1

    def test_output_tile_clamped_by_shorter_timeline(self):
        assert output_tile_at(30, total_steps=50) == OutputTile(1, 1)
        assert output_tile_at(50, total_steps=50) == OutputTile(1, 1)

    def test_reduction_index(self):
        for step in ALL_STEPS:
            k = reduction_index_at(step)
            assert k == (step % 25) // 6
            assert 0 <= k <= 4

    def test_reduction_index_cycles_with_blocks(self):
        assert [reduction_index_at(s) for s in (0, 5, 6, 12, 18, 24, 25)] == [0, 0, 1, 2, 3, 4, 0]

    def test_thread_index(self):
        assert thread_index_at(0) == ThreadIndex(0, 0)
        assert thread_index_at(57) == ThreadIndex(5, 7)
        assert thread_index_at(100) == ThreadIndex(10, 0)


class TestCellProgress:
    """Test suite for result cell fill percentages."""

    def test_all_zero_at_start(self):
        for row, col in ALL_CELLS:
            assert cell_progress_at(row, col, 0) == 0

    def test_active_cell_fills_linearly(self):
        assert cell_progress_at(0, 0, 10) == 40
        assert cell_progress_at(0, 0, 24) == 96
        assert cell_progress_at(2, 2, 63) == 52

    def test_cells_before_sweep_are_complete(self):
        # Block 1: everything before (1, 1) in row-major order
        for row, col in [(0, 0), (0, 1), (0, 2), (0, 3), (1, 0)]:
            assert cell_progress_at(row, col, 25) == 100
        assert cell_progress_at(1, 1, 25) == 0
        assert cell_progress_at(1, 2, 25) == 0
        assert cell_progress_at(2, 0, 25) == 0

    @pytest.mark.parametrize("cell", ALL_CELLS)
    def test_progress_is_monotonic(self, cell):
        row, col = cell
        values = [cell_progress_at(row, col, step) for step in ALL_STEPS]
        assert all(0 <= v <= 100 for v in values)
        assert values == sorted(values)
        assert values[-1] == 100

    def test_progress_holds_once_complete(self):
        for row, col in ALL_CELLS:
            values = [cell_progress_at(row, col, step) for step in ALL_STEPS]
            first_full = values.index(100)
            assert all(v == 100 for v in values[first_full:])

    def test_grid_matches_scalar_function(self):
        for step in ALL_STEPS:
            state = compute_state(step)
            for row, col in ALL_CELLS:
                assert state.progress(row, col) == cell_progress_at(row, col, step)


class TestSharedTiles:
    """Test suite for the shared memory tile view."""

    def test_first_load(self):
        state = compute_state(0)
        assert state.tile_m.elements == (((0, 0), (0, 1)), ((1, 0), (1, 1)))
        assert state.tile_n.elements == (((0, 0), (0, 1)), ((1, 0), (1, 1)))
        assert state.tile_m.filled == ((True, False), (True, False))
        assert state.tile_n.filled == ((True, True), (False, False))
        assert state.tile_m.filled_count == 2

    def test_tiles_fill_completely_after_first_reduction(self):
        state = compute_state(31)  # block 1, k = 1
        assert state.tile_m.filled_count == 4
        assert state.tile_n.filled_count == 4
        assert state.tile_m.element(0, 0) == (2, 1)
        assert state.tile_n.element(0, 0) == (1, 2)
        assert state.tile_n.element(1, 1) == (2, 3)

    def test_tile_labels_follow_unclamped_block(self):
        state = compute_state(100)
        assert state.tile_m.element(0, 0) == (8, 0)
        assert state.tile_m.matrix == "M"
        assert state.tile_n.matrix == "N"


class TestSimulationState:
    """Test suite for compute_state and the reference scenarios."""

    def test_step_zero(self):
        state = compute_state(0, 100)
        assert state.phase is Phase.LOAD
        assert state.output_tile == OutputTile(0, 0)
        assert state.reduction_index == 0
        assert state.completed_cells == 0
        assert not state.progress_grid().any()

    def test_step_24(self):
        state = compute_state(24, 100)
        assert state.output_tile == OutputTile(0, 0)
        assert state.reduction_index == 4
        assert state.progress(0, 0) == 96

    def test_step_50_phase_runs_ahead_of_tile(self):
        state = compute_state(50, 100)
        assert state.phase is Phase.COMPUTE
        assert state.output_tile == OutputTile(2, 2)
        assert state.reduction_index == 0
        assert state.progress(2, 2) == 0
        assert state.completed_cells == 10

    def test_last_step_completes_every_cell(self):
        state = compute_state(100, 100)
        assert state.phase is Phase.COMPUTE
        assert state.output_tile == OutputTile(3, 3)
        assert state.completed_cells == MATRIX_SIZE * MATRIX_SIZE

    def test_idempotent(self):
        for step in ALL_STEPS:
            first = compute_state(step, 100)
            second = compute_state(step, 100)
            assert first == second
            assert np.array_equal(first.progress_grid(), second.progress_grid())

    def test_progress_grid_shape(self):
        grid = compute_state(37).progress_grid()
        assert grid.shape == (MATRIX_SIZE, MATRIX_SIZE)
        assert grid[1, 1] == 48

    def test_focus_elements(self):
        state = compute_state(45)  # block 1, k = 3
        assert state.focus_m == (1, 3)
        assert state.focus_n == (3, 1)

    def test_loading_highlights_only_in_load_phase(self):
        assert compute_state(13).loading_column == 2
        assert compute_state(13).loading_row == 2
        assert compute_state(60).loading_column is None
        assert compute_state(60).loading_row is None

    def test_load_description(self):
        assert compute_state(0).description() == (
            "Loading tiles from global memory to shared memory: "
            "Thread(0,0) loads elements"
        )

    def test_compute_description(self):
        assert compute_state(62).description() == (
            "Performing computation: Thread(6,2) computing P[2,2] += M[2,2] * N[2,2]"
        )
        assert compute_state(80).description() == (
            "Performing computation: Thread(8,0) computing P[3,3] += M[3,0] * N[0,3]"
        )


class TestShorterTimelines:
    """Progress for timelines other than the 100-step reference."""

    @pytest.mark.parametrize("total_steps", [0, 10, 40, 50, 60, 75, 100, 130])
    def test_every_cell_complete_at_end(self, total_steps):
        state = compute_state(total_steps, total_steps)
        assert state.completed_cells == MATRIX_SIZE * MATRIX_SIZE

    @pytest.mark.parametrize("total_steps", [10, 40, 50, 60, 75, 130])
    def test_progress_is_monotonic(self, total_steps):
        for row, col in ALL_CELLS:
            values = [
                cell_progress_at(row, col, step, total_steps)
                for step in range(total_steps + 1)
            ]
            assert values == sorted(values)
            assert values[-1] == 100

    @pytest.mark.parametrize("total_steps", [10, 40, 50, 60, 75, 130])
    def test_active_cell_is_output_tile(self, total_steps):
        for step in range(total_steps):
            state = compute_state(step, total_steps)
            block = progress_block(step, total_steps)
            if block < MATRIX_SIZE:
                assert (block, block) == state.output_tile
            for row, col in ALL_CELLS:
                assert state.progress(row, col) == cell_progress_at(row, col, step, total_steps)

    def test_half_length_timeline(self):
        state = compute_state(49, 50)
        assert state.output_tile == OutputTile(1, 1)
        assert state.progress(1, 1) == 96
        assert state.progress(2, 0) == 0
        assert state.progress(2, 2) == 0
        assert progress_block(50, 50) == MATRIX_SIZE

    def test_reference_timeline_unchanged(self):
        assert [progress_block(s) for s in (0, 24, 25, 99, 100)] == [0, 0, 1, 3, MATRIX_SIZE]
