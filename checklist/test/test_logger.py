"""
Tests for the JSON file logging
"""
import json
import logging

from checklist.logger import JsonFormatter, file_handler


def _record(message, level=logging.INFO):
    return logging.LogRecord('checklist', level, __file__, 1, message, None, None)


def test_file_handler_appends_to_existing_log(tmp_path):
    path = tmp_path / 'checklist.log'
    path.write_text('{"message": "from the web server"}\n', encoding='utf-8')

    handler = file_handler(path, logging.INFO, JsonFormatter({"message": "message"}))
    handler.emit(_record('from the notifier'))
    handler.close()

    lines = path.read_text(encoding='utf-8').splitlines()
    assert [json.loads(line)['message'] for line in lines] == ['from the web server', 'from the notifier']


def test_file_handler_level(tmp_path):
    path = tmp_path / 'errors.log'
    handler = file_handler(path, logging.ERROR, JsonFormatter())
    assert handler.level == logging.ERROR
    handler.close()


def test_json_formatter_includes_time():
    formatter = JsonFormatter({"time": "asctime", "level": "levelname", "message": "message"})
    payload = json.loads(formatter.format(_record('Equipment 3 cleaned', logging.WARNING)))
    assert payload['level'] == 'WARNING'
    assert payload['message'] == 'Equipment 3 cleaned'
    assert payload['time'].endswith('Z')
