"""Milestone years derived from an age."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AgeMilestones:
    """Key years on the standard Japanese school-to-work timeline."""
    birth_year: int
    high_school_grad_year: int     # 18歳
    university_grad_year: int      # 22歳
    employment_start_year: int     # 22歳 新卒
    alternate_start_year: int      # 23歳 浪人・院進学
    graduate_start_year: int       # 24歳 修士卒
