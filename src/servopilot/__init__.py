"""servopilot - calibrated hobby servo control over hardware PWM."""

__version__ = "0.1.0"
