#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Run test suite locally with proper environment setup.
"""
import os
import sys
import subprocess
from pathlib import Path


def setup_test_env():
    """Set up test environment variables."""
    env = os.environ.copy()
    env.update({
        "COMGATE_MERCHANT_GATEWAY_ID": "some_id_from_comgate",
        "COMGATE_SECRET": "gx4q8OV3TJt6noJnfhjqJKyX3Z6Ych0y",
        "COMGATE_TEST_CALLS": "1",
        "COMGATE_BASE_URL": "https://payments.comgate.cz/v1.0",
    })
    return env


def run_command(cmd: list[str], env: dict) -> int:
    """Run a command with the given environment."""
    print(f"\n🚀 Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env)
    return result.returncode


def main():
    """Run the test suite."""
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    env = setup_test_env()

    print("\n📦 Installing project with test extras...")
    run_command([sys.executable, "-m", "pip", "install", "-e", ".[test]"], env)

    if len(sys.argv) > 1:
        cmd = [sys.executable, "-m", "pytest"] + sys.argv[1:]
    else:
        cmd = [sys.executable, "-m", "pytest", "tests/", "-v", "--cov=comgate_client", "--cov=comgate_receiver", "--cov-report=term"]

    exit_code = run_command(cmd, env)

    if exit_code == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Tests failed with exit code {exit_code}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
