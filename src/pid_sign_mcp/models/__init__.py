"""Data models for display pages."""

from .page import Page, PageAnimate
