"""
Консольные команды (запускаются cron-ом или вручную).
"""
