# Operational one-off commands, run with python -m skill_exchange.scripts.<name>
