"""Jonker-Volgenant solver for the linear assignment problem."""

from __future__ import annotations

import math
from typing import Sequence

LARGE = 1000000.0
_LONG_MAX = float(2**63 - 1)

CostMatrix = list[list[float]]


def _column_reduction(cost: CostMatrix, n: int):
    """Column reduction and reduction transfer; returns free rows, x, y, v."""
    x = [-1] * n
    y = [0] * n
    v = [LARGE] * n
    for i, row in enumerate(cost):
        for j, c in enumerate(row):
            if c < v[j]:
                v[j] = c
                y[j] = i
    unique = [True] * n
    for j in reversed(range(n)):
        i = y[j]
        if x[i] < 0:
            x[i] = j
        else:
            unique[i] = False
            y[j] = -1
    free_rows = []
    for i in range(n):
        if x[i] < 0:
            free_rows.append(i)
        elif unique[i]:
            j = x[i]
            reduced = [cost[i][j2] - v[j2] for j2 in range(n) if j2 != j]
            v[j] -= min([LARGE, *reduced])
    return free_rows, x, y, v


def _augmenting_row_reduction(
    cost: CostMatrix, n: int, free_rows: list[int], x: list[int], y: list[int], v: list[float]
) -> list[int]:
    """One pass of augmenting row reduction; returns the rows still free."""
    rows = list(free_rows)
    n_free = len(rows)
    current = 0
    new_free = 0
    rr_cnt = 0
    while current < n_free:
        rr_cnt += 1
        free_i = rows[current]
        current += 1
        row = cost[free_i]
        j1, v1 = 0, row[0] - v[0]
        j2, v2 = -1, LARGE
        for j in range(1, n):
            c = row[j] - v[j]
            if c < v2:
                if c >= v1:
                    v2, j2 = c, j
                else:
                    v2, v1 = v1, c
                    j2, j1 = j1, j
        i0 = y[j1]
        v1_new = v[j1] - (v2 - v1)
        v1_lowers = v1_new < v[j1]
        if rr_cnt < current * n:
            if v1_lowers:
                v[j1] = v1_new
            elif i0 >= 0 and j2 >= 0:
                j1 = j2
                i0 = y[j2]
            if i0 >= 0:
                if v1_lowers:
                    current -= 1
                    rows[current] = i0
                else:
                    rows[new_free] = i0
                    new_free += 1
        elif i0 >= 0:
            rows[new_free] = i0
            new_free += 1
        x[free_i] = j1
        y[j1] = free_i
    return rows[:new_free]


def _find(n: int, lo: int, d: list[float], cols: list[int]) -> int:
    """Move the columns with minimum ``d`` to the front of the scan list."""
    hi = lo + 1
    mind = d[cols[lo]]
    for k in range(lo + 1, n):
        j = cols[k]
        if d[j] <= mind:
            if d[j] < mind:
                hi = lo
                mind = d[j]
            cols[k] = cols[hi]
            cols[hi] = j
            hi += 1
    return hi


def _scan(
    cost: CostMatrix,
    n: int,
    lo: int,
    hi: int,
    d: list[float],
    cols: list[int],
    pred: list[int],
    y: list[int],
    v: list[float],
) -> tuple[int, int, int]:
    """Lower ``d`` of unscanned columns; returns (free column or -1, lo, hi)."""
    start_lo, start_hi = lo, hi
    while lo != hi:
        j = cols[lo]
        lo += 1
        i = y[j]
        mind = d[j]
        h = cost[i][j] - v[j] - mind
        for k in range(hi, n):
            j = cols[k]
            cred_ij = cost[i][j] - v[j] - h
            if cred_ij < d[j]:
                d[j] = cred_ij
                pred[j] = i
                if cred_ij == mind:
                    if y[j] < 0:
                        return j, start_lo, start_hi
                    cols[k] = cols[hi]
                    cols[hi] = j
                    hi += 1
    return -1, lo, hi


def _find_path(
    cost: CostMatrix, n: int, start_i: int, y: list[int], v: list[float], pred: list[int]
) -> int:
    """Shortest augmenting path from ``start_i``; returns the free column reached."""
    lo = hi = 0
    final_j = -1
    n_ready = 0
    cols = list(range(n))
    pred[:] = [start_i] * n
    d = [c - vj for c, vj in zip(cost[start_i], v)]
    while final_j == -1:
        if lo == hi:
            n_ready = lo
            hi = _find(n, lo, d, cols)
            for j in cols[lo:hi]:
                if y[j] < 0:
                    final_j = j
        if final_j == -1:
            final_j, lo, hi = _scan(cost, n, lo, hi, d, cols, pred, y, v)
    mind = d[cols[lo]]
    for j in cols[:n_ready]:
        v[j] += d[j] - mind
    return final_j


def _augment(
    cost: CostMatrix, n: int, free_rows: list[int], x: list[int], y: list[int], v: list[float]
) -> None:
    pred = [0] * n
    for free_i in free_rows:
        j = _find_path(cost, n, free_i, y, v, pred)
        i = -1
        while i != free_i:
            i = pred[j]
            y[j] = i
            j, x[i] = x[i], j


def solve_dense(cost: Sequence[Sequence[float]]) -> tuple[list[int], list[int]]:
    """Solve a square assignment problem minimising total cost.

    Returns ``(x, y)`` where ``x[row]`` is the column given to each row and
    ``y[col]`` the row given to each column.
    """
    matrix = [[float(c) for c in row] for row in cost]
    n = len(matrix)
    if any(len(row) != n for row in matrix):
        raise ValueError("solve_dense needs a square cost matrix")
    if n == 0:
        return [], []
    free_rows, x, y, v = _column_reduction(matrix, n)
    passes = 0
    while free_rows and passes < 2:
        free_rows = _augmenting_row_reduction(matrix, n, free_rows, x, y, v)
        passes += 1
    if free_rows:
        _augment(matrix, n, free_rows, x, y, v)
    return x, y


def lapjv(
    cost: Sequence[Sequence[float]],
    extend_cost: bool = False,
    cost_limit: float = math.inf,
    return_cost: bool = True,
) -> tuple[float, list[int], list[int]]:
    """Assign rows to columns of a possibly rectangular cost matrix.

    Returns ``(total_cost, rowsol, colsol)``; an unassigned row or column
    gets -1. With a finite ``cost_limit`` a pairing costing more than the
    limit is left unassigned. A rectangular matrix needs ``extend_cost``.
    """
    matrix = [[float(c) for c in row] for row in cost]
    if not matrix or not matrix[0]:
        raise ValueError("lapjv needs a non-empty cost matrix")
    n_rows = len(matrix)
    n_cols = len(matrix[0])
    if any(len(row) != n_cols for row in matrix):
        raise ValueError("every row of the cost matrix must have the same length")

    n = n_rows
    if n_rows != n_cols and not extend_cost:
        raise ValueError("a rectangular cost matrix needs extend_cost=True")

    limited = cost_limit < _LONG_MAX
    if extend_cost or limited:
        n = n_rows + n_cols
        if limited:
            fill = cost_limit / 2.0
        else:
            fill = max([-1.0, *(c for row in matrix for c in row)]) + 1
        extended = [[fill] * n for _ in range(n)]
        for row in extended[n_rows:]:
            row[n_cols:] = [0.0] * (n - n_cols)
        for target, source in zip(extended, matrix):
            target[:n_cols] = source
        matrix = extended

    x, y = solve_dense(matrix)

    if n != n_rows:
        rowsol = [c if c < n_cols else -1 for c in x[:n_rows]]
        colsol = [r if r < n_rows else -1 for r in y[:n_cols]]
        total = (
            sum(matrix[i][j] for i, j in enumerate(rowsol) if j != -1)
            if return_cost
            else 0.0
        )
    else:
        rowsol, colsol = x, y
        total = sum(matrix[i][j] for i, j in enumerate(rowsol)) if return_cost else 0.0
    return total, rowsol, colsol