"""
SlideSmith - AI presentation planning and slide image generation

This package adapts two upstream LLM protocols (Vertex/Gemini-style and
OpenAI-compatible) and two transports (direct and proxied) behind one
facade that plans a deck and renders slide images.
"""

from .llm import generate_slide_image, optimize_content, plan_presentation

__all__ = ["generate_slide_image", "optimize_content", "plan_presentation"]
