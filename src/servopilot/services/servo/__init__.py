"""
Servo service module.

- calibration: piecewise-linear angle calibration
- mapper: angle validation and PWM scaling
- pwm_sinks: PWM output backends (pigpio hardware PWM, in-memory recorder)
- command_sources: where angles come from (prompt, script, file)
- controller: the read/map/apply/log loop
"""
