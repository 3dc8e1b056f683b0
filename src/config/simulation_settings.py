"""
Centralized Simulation Settings

Simple True/False toggles for the daily trade simulation.
Change these settings to speed up simulations for testing.
"""


class SimulationSettings:
    """
    Simulation speed controls.

    True  = SKIP (faster, for testing)
    False = RUN NORMALLY (realistic, for gameplay)
    """

    # ================================================================
    # CHANGE THESE TO SPEED UP SIMULATIONS
    # ================================================================

    SKIP_TRANSACTION_AI = False
    # True:  Skip the daily CPU trade round (no CPU-to-CPU trades)
    # False: Run the CPU trade round every simulated day

    LOG_REJECTED_CANDIDATES = False
    # True:  Log every rejected CPU trade candidate at INFO
    # False: Rejections are logged at DEBUG only
