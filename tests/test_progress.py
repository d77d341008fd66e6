from azcops.cli.common.progress import _MAX_LABEL_WIDTH, execution_label


def test_execution_label_uses_last_id_segment():
    value = "/subscriptions/s/resourceGroups/rg/providers/Microsoft.App/jobs/j/executions/j-1"

    assert execution_label(value) == "j-1"
    assert execution_label(value + "/") == "j-1"


def test_execution_label_truncates_long_names():
    label = execution_label("/executions/" + "e" * (_MAX_LABEL_WIDTH + 5))

    assert len(label) == _MAX_LABEL_WIDTH
    assert label.endswith("...")
