"""
Prompt template for the intent classifier.

The classifier model is not schema-constrained, so the prompt insists on
a bare JSON object; the parser still tolerates surrounding prose.
"""

from __future__ import annotations


def build_classifier_prompt(query: str, subject: str | None) -> str:
    return f"""Classify the following student query into exactly ONE category. Respond with ONLY a JSON object, no markdown.

Categories:
- FACTUAL: Questions about facts, definitions, history, or information that needs sources
- CONCEPTUAL: Questions asking for explanations, understanding concepts, how things work
- MATH: Questions requiring mathematical computation, derivations, equations, proofs
- CODE: Questions about programming, code generation, debugging, algorithms
- GRAPH: Questions explicitly asking for visualizations, plots, charts, or diagrams
- MIXED: Questions combining multiple categories (e.g. "solve this equation and plot it")

Query: "{query}"
Subject context: {subject or "General"}

Respond with this exact JSON format:
{{"intent": "CATEGORY_NAME", "confidence": 0.0-1.0, "needsRetrieval": true/false, "needsComputation": true/false, "needsVisualization": true/false}}"""
