"""
Расчёты календаря: часы работы, бизнес-день, доступность, happy hour, загрузка и выручка
"""
