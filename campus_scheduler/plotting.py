import matplotlib
matplotlib.use('Agg')  # Render to files only

import matplotlib.patches as patches
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from typing import List, Sequence

from campus_scheduler.models import ScheduleCandidate
from campus_scheduler.utils import DAYS_OF_WEEK, time_function


def split_text(text: str, max_width: int) -> str:
    """
    Split longer text to fit inside a course patch on the plot.

    Args:
        text (str): The text to be split.
        max_width (int): The maximum width of the text in characters.

    Returns:
        str: The split text with line breaks.
    """
    words = text.split(' ')
    lines = []
    current_line = words[0]
    for word in words[1:]:
        if len(current_line) + len(word) + 1 <= max_width:
            current_line += ' ' + word
        else:
            lines.append(current_line)
            current_line = word
    lines.append(current_line)
    return '\n'.join(lines)


def setup_axes(ax: plt.Axes, days: List[str]) -> None:
    """
    Set up the axes, ticks, labels, and gridlines for the plot.

    Args:
        ax (matplotlib.axes.Axes): The axes to set up.
        days (list): The list of day labels.
    """
    ax.set_xlim(-0.5, len(days) - 0.5)
    # Hours from 7 AM to 10 PM, inverted to look like a weekly planner page
    ax.set_ylim(22, 7)
    ax.set_xticks(range(len(days)))
    ax.set_xticklabels(days)
    ax.set_yticks(range(7, 22))
    ax.set_yticklabels([f"{hour}:00" for hour in range(7, 22)])

    # Default gridlines go through, not around, days on the x-axis
    for i in range(len(days)):
        ax.axvline(x=i - 0.5, color='gray', linestyle='-', zorder=1)
    for hour in range(8, 22):
        ax.axhline(y=hour, color='gray', linestyle='-', zorder=1)


@time_function
def plot_schedule(candidate: ScheduleCandidate, option_number: int) -> plt.Figure:
    """
    Plot a schedule candidate in a "weekly planner page" format.

    Args:
        candidate (ScheduleCandidate): The candidate to be plotted.
        option_number (int): The option number for the schedule.

    Returns:
        matplotlib.figure.Figure: The figure object containing the plot.
    """
    colors = [
        'lightblue', 'lightcoral', 'lightgreen', 'lightsalmon', 'lightpink',
        'lightseagreen', 'skyblue', 'lightgoldenrodyellow', 'lightcyan', 'lightgray'
    ]
    # Assign colors by sorted course code, to keep colors consistent across schedules
    course_codes = sorted(set(candidate.course_codes))
    color_map = {code: colors[i % len(colors)] for i, code in enumerate(course_codes)}

    fig, ax = plt.subplots(figsize=(12, 10))
    setup_axes(ax, DAYS_OF_WEEK)

    for section in candidate.sections:
        color = color_map.get(section.course_code, 'lightgrey')
        label = split_text(f"{section.course_code} {section.crn} Bldg {section.building}-{section.room}",
                           max_width=15)
        for meeting in section.meetings:
            day_index = DAYS_OF_WEEK.index(meeting.day)
            start_hour = meeting.start_minutes / 60
            end_hour = meeting.end_minutes / 60
            rect = patches.Rectangle(
                (day_index - 0.5, start_hour),  # (x, y) position of the upper left corner
                1,
                end_hour - start_hour,
                linewidth=1,
                edgecolor='black',
                facecolor=color,
                zorder=5
            )
            ax.add_patch(rect)
            ax.text(
                day_index,
                (start_hour + end_hour) / 2,
                label,
                verticalalignment='center',
                horizontalalignment='center',
                zorder=6,
                fontsize=9
            )

    title_text = (
        f"Schedule Option {option_number}\n"
        f"Score: {candidate.score}, Total Credits: {candidate.total_credits}, "
        f"Total Walking Time: {candidate.total_walking_time} min"
    )
    plt.title(title_text, zorder=10)
    return fig


@time_function
def plot_schedules(candidates: Sequence[ScheduleCandidate], file_name: str = 'schedules.pdf') -> None:
    """
    Plot ranked schedule candidates & save them to a PDF file.

    Args:
        candidates (list): Ranked schedule candidates.
        file_name (str): The PDF file to write.
    """
    with PdfPages(file_name) as pdf:
        for i, candidate in enumerate(candidates, start=1):
            fig = plot_schedule(candidate, i)
            pdf.savefig(fig)
            plt.close(fig)
