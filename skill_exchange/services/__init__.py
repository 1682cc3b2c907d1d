# skill_exchange/services/__init__.py
# Business operations spanning several tables. Modules are imported directly.
