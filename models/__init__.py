#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Models Package
Модели данных и перечисления трекера привычек
"""

from .enums import (
    DayStatus,
    CellFlag,
    Theme,
    NoticeKind
)

from .goal import (
    StatusStore,
    Goal
)

__all__ = [
    # Enums
    'DayStatus',
    'CellFlag',
    'Theme',
    'NoticeKind',

    # Goal models
    'StatusStore',
    'Goal'
]
