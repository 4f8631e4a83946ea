"""
Test suite for the Fuzzy Skateboard Braking Simulation.

This package contains unit tests organized by component:
- test_membership.py: Tests for membership function shapes
- test_fuzzy_inference.py: Tests for the Mamdani inference engine
- test_controller_config.py: Tests for controller configuration ownership
- test_params.py: Tests for SkateboardParams and state creation
- test_dynamics.py: Tests for the integrator and stop classifier
- test_scheduler.py: Tests for the fixed-step scheduler
- test_simulation.py: Tests for simulation sessions
- test_sample_log.py: Tests for the sample log
- test_run_analysis.py: Tests for run analysis and the reference solution
- test_integration.py: Integration tests for sweeps and the dashboard
"""
