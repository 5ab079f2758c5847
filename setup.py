from setuptools import setup, find_packages

setup(
    name="xts_interactive",
    version="0.1.0",
    description="XTS Interactive API client - REST session wrapper and order/trade socket events",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests",
        "python-socketio[client]",
        "websocket-client",  # websocket transport used by the socketio client
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
)
