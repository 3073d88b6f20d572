"""
Pipeline modules for the study assistant.

Stage 1: Classification   (intent.py, model_selector.py)
Stage 2: Retrieval        (retrieval.py)
Stage 3: Generation       (response_generator.py; prompts live in studyai.prompts)
Stage 4: Post-processing  (segmenter.py, citations.py)

Orchestrated by: orchestrator.py
"""
