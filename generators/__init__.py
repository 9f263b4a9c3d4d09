"""Markup generation for the study wizard."""

from __future__ import annotations

__all__ = ["render_question", "render_study_html"]

from .study_html import render_question, render_study_html
