"""Application factory wiring"""

import subprocess
import sys
from pathlib import Path

import pytest

from app import create_app


ROOT = Path(__file__).resolve().parent.parent


@pytest.mark.parametrize('first_import', [
    'utils.activity_logger',
    'modules.admin',
    'modules.surveys.models',
])
def test_app_starts_whatever_module_loads_first(first_import):
    code = f'import {first_import}\nfrom app import create_app\ncreate_app("testing")\n'

    result = subprocess.run([sys.executable, '-c', code], cwd=ROOT, capture_output=True, text=True)

    assert result.returncode == 0, result.stderr


def test_all_blueprints_registered():
    app = create_app('testing')

    assert {'auth', 'public', 'dashboard', 'layout', 'notifications',
            'surveys', 'responses', 'reports', 'admin'} <= set(app.blueprints)
