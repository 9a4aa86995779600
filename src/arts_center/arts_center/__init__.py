"""Arts Center core package.

Feature modules (classes, schedules, enrollments, attendance, tuition, finance, ...)
follow the same layering: thin Flask controllers, services holding the business
rules, and repository protocols with MySQL implementations.
"""
