from setuptools import setup, find_packages
import re

# Read version from payrollcalc/__init__.py
with open('payrollcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='payroll-calc',
    version=version,
    packages=find_packages(include=['payrollcalc', 'payrollcalc.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'payroll-calc=payrollcalc.cli.__main__:main',
            'payroll-calc-mcp=payrollcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Monthly payroll with statutory deductions, PAYE bands and net-to-gross solving.',
    python_requires='>=3.10',
)
