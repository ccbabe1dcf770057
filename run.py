from opportunityhub import create_app, db
from opportunityhub.models import DataSource, CollectedItem, CollectionSchedule, ExportHistory, DriveSession

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        'db': db,
        'DataSource': DataSource,
        'CollectedItem': CollectedItem,
        'CollectionSchedule': CollectionSchedule,
        'ExportHistory': ExportHistory,
        'DriveSession': DriveSession
    }


if __name__ == '__main__':
    app.run(debug=True)
