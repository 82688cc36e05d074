"""Run from project root. Use: python run_app.py (Streamlit UI) or python run_app.py api (HTTP API)."""
import os
import subprocess
import sys

root = os.path.dirname(os.path.abspath(__file__))
app_dir = os.path.join(root, "ats_resume_ai")
os.chdir(app_dir)
if len(sys.argv) > 1 and sys.argv[1] == "api":
    port = os.getenv("PORT", "8000")
    subprocess.run([sys.executable, "-m", "uvicorn", "api:app", "--host", "0.0.0.0", "--port", port], check=True)
else:
    subprocess.run([sys.executable, "-m", "streamlit", "run", "app.py"], check=True)
