from zeget.appinfo import APPLICATION_REPOSITORY, VERSION, get_application_name


def test_get_application_name():
    assert get_application_name() == "zeget"


def test_repository_names_application():
    assert APPLICATION_REPOSITORY.startswith("permafrost-dev/")
    assert APPLICATION_REPOSITORY.endswith("/" + get_application_name())


def test_version_is_set():
    assert len(VERSION) > 0
    assert VERSION.split(".")[0] == "2"