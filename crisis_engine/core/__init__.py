"""Core model: state, phases, metrics, dynamics, interventions, engine."""
