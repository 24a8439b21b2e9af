import os
import sys
import subprocess


def run(extra_args=None):
    # Launch the Streamlit app from the project root, forwarding any CLI flags
    app_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")
    cmd = [sys.executable, "-m", "streamlit", "run", app_path, *(extra_args or [])]
    print(f"Running command: {' '.join(cmd)}")
    return subprocess.run(cmd).returncode


if __name__ == "__main__":
    sys.exit(run(sys.argv[1:]))
