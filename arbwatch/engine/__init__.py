"""
Core detection, evaluation and orchestration engine.
"""
